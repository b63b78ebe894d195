"""Pydantic models for API request/response."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from .pipeline.stages import Stage


class PositionModel(BaseModel):
    x: float
    y: float


class ParseRequest(BaseModel):
    script: str
    dialect: Literal["yaml", "shell"] = "yaml"


class ParseResponse(BaseModel):
    stages: list[dict[str, Any]]


class PaletteItem(BaseModel):
    label: str
    data: dict[str, Any]


class PaletteResponse(BaseModel):
    items: list[PaletteItem]


class TemplatesResponse(BaseModel):
    yaml: str
    shell: str


class GraphResponse(BaseModel):
    session_id: str
    nodes: list[dict[str, Any]] = Field(default_factory=list)
    edges: list[dict[str, Any]] = Field(default_factory=list)


class AddNodeRequest(BaseModel):
    stage: Stage
    position: PositionModel | None = None


class MoveNodeRequest(BaseModel):
    position: PositionModel


class ConnectRequest(BaseModel):
    source: str
    target: str


class SessionListItem(BaseModel):
    session_id: str
    node_count: int
    edge_count: int


class SessionListResponse(BaseModel):
    sessions: list[SessionListItem]
    total: int
