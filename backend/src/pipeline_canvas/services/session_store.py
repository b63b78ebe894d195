"""In-memory registry of editing sessions and their change events."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from ..config import MAX_SESSION_EVENTS
from ..pipeline import FlowSession

logger = logging.getLogger(__name__)

# session_id -> {"session": FlowSession, "events": [...], "dropped": int}
# "dropped" counts events trimmed from the front, so stream offsets stay absolute.
_session_store: dict[str, dict[str, Any]] = {}


def create_session(session_id: str | None = None) -> FlowSession:
    """Create a session holding only the start node. Its events are recorded for streaming."""
    session_id = session_id or uuid.uuid4().hex
    rec: dict[str, Any] = {"events": [], "dropped": 0}

    def on_event(kind: str, data: dict[str, Any]) -> None:
        events = rec["events"]
        events.append({"kind": kind, "data": data})
        overflow = len(events) - MAX_SESSION_EVENTS
        if overflow > 0:
            del events[:overflow]
            rec["dropped"] += overflow

    rec["session"] = FlowSession(session_id=session_id, on_event=on_event)
    _session_store[session_id] = rec
    logger.info("Created session %s", session_id)
    return rec["session"]


def get_session(session_id: str) -> FlowSession | None:
    rec = _session_store.get(session_id)
    return rec["session"] if rec else None


def events_since(session_id: str, since: int = 0) -> tuple[list[dict[str, Any]], int] | None:
    """Events with absolute index >= ``since`` still in the log, and the next index.

    Returns None once the session is gone.
    """
    rec = _session_store.get(session_id)
    if rec is None:
        return None
    dropped = rec["dropped"]
    events = rec["events"]
    return events[max(since - dropped, 0):], dropped + len(events)


def delete_session(session_id: str) -> bool:
    deleted = _session_store.pop(session_id, None) is not None
    if deleted:
        logger.info("Deleted session %s", session_id)
    return deleted


def list_sessions(page: int = 1, size: int = 20) -> dict[str, Any]:
    items = list(_session_store.items())
    items.reverse()
    total = len(items)
    start = (page - 1) * size
    end = start + size
    sessions = []
    for sid, rec in items[start:end]:
        graph = rec["session"].graph
        sessions.append({"session_id": sid, "node_count": len(graph.nodes), "edge_count": len(graph.edges)})
    return {"sessions": sessions, "total": total}
