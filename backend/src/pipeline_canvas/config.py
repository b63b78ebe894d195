"""Load settings from environment (.env and env vars)."""

from __future__ import annotations

import os
from pathlib import Path

# Load .env from backend root if present
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
if _env_path.exists():
    from dotenv import load_dotenv
    load_dotenv(_env_path)


def _str(key: str, default: str = "") -> str:
    return (os.environ.get(key) or "").strip() or default


def _int(key: str, default: int) -> int:
    try:
        return int(_str(key))
    except ValueError:
        return default


# Logging
LOG_LEVEL = _str("PIPELINE_CANVAS_LOG_LEVEL", "INFO").upper()

# HTTP
CORS_ORIGINS = [o.strip() for o in _str("PIPELINE_CANVAS_CORS_ORIGINS", "*").split(",") if o.strip()]

# Scripts posted to /parse and /generate
MAX_SCRIPT_CHARS = _int("PIPELINE_CANVAS_MAX_SCRIPT_CHARS", 200_000)

# Change events kept per session for the stream endpoint; older ones are dropped
MAX_SESSION_EVENTS = _int("PIPELINE_CANVAS_MAX_SESSION_EVENTS", 500)
