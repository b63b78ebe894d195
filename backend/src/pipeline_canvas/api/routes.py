"""API routes - script parsing and stage-graph editing sessions."""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncGenerator

from fastapi import APIRouter, HTTPException, Response
from sse_starlette.sse import EventSourceResponse

from ..config import MAX_SCRIPT_CHARS
from ..models import (
    AddNodeRequest,
    ConnectRequest,
    GraphResponse,
    MoveNodeRequest,
    PaletteItem,
    PaletteResponse,
    ParseRequest,
    ParseResponse,
    SessionListResponse,
    TemplatesResponse,
)
from ..pipeline import PALETTE, FlowSession, Position, display_label
from ..pipeline.stages import stage_to_dict
from ..services.script_service import (
    ScriptGenerationError,
    default_template,
    generate_nodes_from_script,
    parse_script,
)
from ..services.session_store import create_session, delete_session, events_since, get_session, list_sessions

router = APIRouter(prefix="/api", tags=["api"])


def _session_or_404(session_id: str) -> FlowSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


def _graph_response(session: FlowSession) -> GraphResponse:
    return GraphResponse(session_id=session.session_id, **session.graph.to_dict())


def _check_script_size(script: str) -> None:
    if len(script) > MAX_SCRIPT_CHARS:
        raise HTTPException(413, f"Script exceeds {MAX_SCRIPT_CHARS} characters")


@router.get("/palette", response_model=PaletteResponse)
async def api_palette():
    """Stages the editor can insert, with their default fields."""
    items = []
    for stage in PALETTE:
        data = stage_to_dict(stage)
        data["label"] = display_label(stage)
        items.append(PaletteItem(label=data["label"], data=data))
    return PaletteResponse(items=items)


@router.get("/templates", response_model=TemplatesResponse)
async def api_templates():
    return TemplatesResponse(yaml=default_template("yaml"), shell=default_template("shell"))


@router.post("/parse", response_model=ParseResponse)
async def api_parse(body: ParseRequest):
    """Parse a script into its stage sequence without touching any session."""
    _check_script_size(body.script)
    stages = parse_script(body.script, body.dialect)
    return ParseResponse(stages=[stage_to_dict(s) for s in stages])


@router.post("/sessions", response_model=GraphResponse)
async def api_create_session():
    return _graph_response(create_session())


@router.get("/sessions", response_model=SessionListResponse)
async def api_sessions_list(page: int = 1, size: int = 20):
    return SessionListResponse(**list_sessions(page=page, size=size))


@router.get("/sessions/{session_id}", response_model=GraphResponse)
async def api_get_session(session_id: str):
    return _graph_response(_session_or_404(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def api_delete_session(session_id: str):
    """Drop a session and its event log. Open streams end on their next poll."""
    if not delete_session(session_id):
        raise HTTPException(404, "Session not found")
    return Response(status_code=204)


@router.post("/sessions/{session_id}/generate", response_model=GraphResponse)
async def api_generate(session_id: str, body: ParseRequest):
    """Replace the session's stages with those parsed from a script."""
    session = _session_or_404(session_id)
    _check_script_size(body.script)
    try:
        generate_nodes_from_script(session, body.script, body.dialect)
    except ScriptGenerationError as e:
        raise HTTPException(422, str(e))
    return _graph_response(session)


@router.post("/sessions/{session_id}/nodes", response_model=GraphResponse)
async def api_add_node(session_id: str, body: AddNodeRequest):
    session = _session_or_404(session_id)
    position = Position(body.position.x, body.position.y) if body.position else None
    session.append_node(body.stage, position)
    return _graph_response(session)


@router.patch("/sessions/{session_id}/nodes/{node_id}", response_model=GraphResponse)
async def api_move_node(session_id: str, node_id: str, body: MoveNodeRequest):
    session = _session_or_404(session_id)
    try:
        session.move_node(node_id, Position(body.position.x, body.position.y))
    except KeyError:
        raise HTTPException(404, "Node not found")
    return _graph_response(session)


@router.delete("/sessions/{session_id}/nodes/{node_id}", response_model=GraphResponse)
async def api_remove_node(session_id: str, node_id: str):
    session = _session_or_404(session_id)
    try:
        session.remove_node(node_id)
    except KeyError:
        raise HTTPException(404, "Node not found")
    return _graph_response(session)


@router.post("/sessions/{session_id}/edges", response_model=GraphResponse)
async def api_connect(session_id: str, body: ConnectRequest):
    session = _session_or_404(session_id)
    try:
        session.connect(body.source, body.target)
    except KeyError:
        raise HTTPException(404, "Node not found")
    return _graph_response(session)


@router.delete("/sessions/{session_id}/edges/{edge_id}", response_model=GraphResponse)
async def api_remove_edge(session_id: str, edge_id: str):
    session = _session_or_404(session_id)
    try:
        session.remove_edge(edge_id)
    except KeyError:
        raise HTTPException(404, "Edge not found")
    return _graph_response(session)


@router.post("/sessions/{session_id}/reset", response_model=GraphResponse)
async def api_reset(session_id: str):
    session = _session_or_404(session_id)
    session.reset()
    return _graph_response(session)


@router.get("/sessions/{session_id}/stream")
async def api_session_stream(session_id: str, follow: bool = True):
    """SSE stream of session change events. With follow=false, replay the backlog and close."""
    _session_or_404(session_id)

    async def event_generator() -> AsyncGenerator[dict[str, Any], None]:
        last_index = 0
        while True:
            batch = events_since(session_id, last_index)
            if batch is None:
                break
            events, last_index = batch
            for ev in events:
                yield {"event": ev["kind"], "data": json.dumps(ev)}
            if not follow:
                break
            await asyncio.sleep(0.3)

    return EventSourceResponse(event_generator())
