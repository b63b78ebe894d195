"""Shell script parser: one stage per meaningful line, no shell semantics."""

from __future__ import annotations

import logging

from .rules import SHELL_RULES, SHELL_SKIP_PREFIXES, classify
from .stages import Stage, StartStage

logger = logging.getLogger(__name__)


def is_skipped(line: str) -> bool:
    """Blank lines, comments, shebangs, ``set`` directives and ``echo`` logging."""
    return not line or line.startswith(SHELL_SKIP_PREFIXES)


def parse_shell(script: str) -> list[Stage]:
    """Parse a shell script into a stage sequence. Always starts with a start stage."""
    stages: list[Stage] = [StartStage(label="Start")]
    for raw in script.splitlines():
        line = raw.strip()
        if is_skipped(line):
            continue
        # SHELL_RULES ends with a catch-all row, so every line yields a stage.
        stages.append(classify(line, SHELL_RULES))
    logger.debug("Parsed shell script into %d stages", len(stages))
    return stages
