"""Parse a workflow or shell script from disk and print its stages as JSON.

Usage:
  poetry run python -m pipeline_canvas.scripts.parse_script path/to/ci.yml
  poetry run python -m pipeline_canvas.scripts.parse_script build.sh --dialect shell

The dialect defaults from the file extension (.yml/.yaml -> yaml, otherwise shell).
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from ..pipeline.stages import stage_to_dict
from ..services.script_service import parse_script


def _guess_dialect(path: Path) -> str:
    return "yaml" if path.suffix.lower() in (".yml", ".yaml") else "shell"


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path)
    parser.add_argument("--dialect", choices=("yaml", "shell"), default=None)
    args = parser.parse_args(argv)

    if not args.path.exists():
        raise SystemExit(f"File not found: {args.path}")
    dialect = args.dialect or _guess_dialect(args.path)
    stages = parse_script(args.path.read_text(encoding="utf-8"), dialect)
    print(json.dumps([stage_to_dict(s) for s in stages], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
