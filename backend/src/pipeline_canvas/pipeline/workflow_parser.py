"""CI-workflow (YAML-flavored) script parser.

This is a line-shape scanner, not a YAML parser: only ``- name:``, ``uses:``,
``run:`` and block ``run: |`` lines are recognized, everything else is ignored.
Unmatched ``run:`` commands become custom stages labeled with the step name.
"""

from __future__ import annotations

import logging

from .rules import WORKFLOW_RUN_RULES, WORKFLOW_USES_RULES, classify
from .stages import PrebuildCustomStage, Stage, StartStage

logger = logging.getLogger(__name__)

_BLOCK_INDICATORS = ("|", "|-", "|+", ">", ">-", ">+")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _classify_command(command: str, step_name: str) -> Stage:
    stage = classify(command, WORKFLOW_RUN_RULES)
    if stage is None:
        stage = PrebuildCustomStage(label=step_name or "Custom Command", script=command)
    return stage


def _read_block(lines: list[str], start: int, key_indent: int) -> tuple[str, int]:
    """Collect the body of a block ``run:`` starting at ``start``.

    Returns (joined command, index of the first line not consumed). The body
    ends at the first blank line or the first line not indented past the key.
    """
    body: list[str] = []
    j = start
    while j < len(lines):
        raw = lines[j]
        if not raw.strip() or _indent_of(raw) <= key_indent:
            break
        body.append(raw.strip())
        j += 1
    return "\n".join(body), j


def parse_workflow(script: str) -> list[Stage]:
    """Parse workflow text into a stage sequence. Always starts with a start stage."""
    stages: list[Stage] = [StartStage(label="Start")]
    lines = script.splitlines()
    step_name: str | None = None

    i = 0
    while i < len(lines):
        raw = lines[i]
        line = raw.strip()
        i += 1

        if line.startswith("- name:"):
            step_name = line[len("- name:"):].strip().replace('"', "").replace("'", "")
            continue

        if step_name is None:
            continue

        if line.startswith("uses:"):
            action = line[len("uses:"):].strip()
            stage = classify(action, WORKFLOW_USES_RULES)
            if stage is not None:
                stages.append(stage)
            continue

        if line.startswith("run:"):
            value = line[len("run:"):].strip()
            if value in _BLOCK_INDICATORS:
                command, i = _read_block(lines, i, _indent_of(raw))
            else:
                command = value
            stages.append(_classify_command(command, step_name))
            step_name = None

    logger.debug("Parsed workflow script into %d stages", len(stages))
    return stages
