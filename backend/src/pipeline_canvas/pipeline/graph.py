"""Graph model for the stage editor - nodes, edges and the graph holding them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .stages import Stage, display_label, stage_to_dict

START_NODE_ID = "start"
ARROW_CLOSED = "arrowclosed"


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class FlowNode:
    """A stage placed on the canvas. The stage is immutable; the position is not."""

    id: str
    stage: Stage
    position: Position = field(default_factory=Position)

    @property
    def kind(self) -> str:
        return self.stage.kind

    @property
    def display_name(self) -> str:
        return display_label(self.stage)

    def to_dict(self) -> dict[str, Any]:
        data = stage_to_dict(self.stage)
        data["label"] = self.display_name
        return {
            "id": self.id,
            "position": {"x": self.position.x, "y": self.position.y},
            "data": data,
        }


@dataclass(frozen=True)
class FlowEdge:
    """Directed edge; ``label`` holds the 1-based main-path order, if any."""

    id: str
    source: str
    target: str
    label: str | None = None
    animated: bool = True
    marker_end: str = ARROW_CLOSED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "animated": self.animated,
            "markerEnd": {"type": self.marker_end},
        }


def edge_id(source: str, target: str) -> str:
    return f"edge-{source}-{target}"


@dataclass
class FlowGraph:
    """Nodes in append order plus edges in creation order."""

    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)

    def get_node(self, node_id: str) -> FlowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, eid: str) -> FlowEdge | None:
        for edge in self.edges:
            if edge.id == eid:
                return edge
        return None

    def has_edge(self, source: str, target: str) -> bool:
        return any(e.source == source and e.target == target for e in self.edges)

    def outgoing_edges(self, node_id: str) -> list[FlowEdge]:
        return [e for e in self.edges if e.source == node_id]

    def find_start_node(self) -> FlowNode | None:
        for node in self.nodes:
            if node.kind == "start":
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
