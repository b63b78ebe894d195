"""Graph sequencer - auto-edges, main-path order labels and the editing session."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from .assembly import START_POSITION, assemble_graph, stacked_position
from .graph import ARROW_CLOSED, START_NODE_ID, FlowEdge, FlowGraph, FlowNode, Position, edge_id
from .stages import Stage, StartStage

logger = logging.getLogger(__name__)

# Event callback: (event_kind, data) -> None
EventCallback = Callable[[str, dict[str, Any]], None]


def auto_connect(graph: FlowGraph) -> FlowEdge | None:
    """Join the last two appended nodes unless the last is a start node or already joined."""
    if len(graph.nodes) < 2:
        return None
    prev, last = graph.nodes[-2], graph.nodes[-1]
    if last.kind == "start" or graph.has_edge(prev.id, last.id):
        return None
    edge = FlowEdge(id=edge_id(prev.id, last.id), source=prev.id, target=last.id)
    graph.edges.append(edge)
    return edge


def main_path(graph: FlowGraph) -> list[str]:
    """Node ids along the unique-successor chain from the start node.

    The walk halts at a node with zero or several outgoing edges, at a revisit,
    or at an edge pointing to a node that is not in the graph.
    """
    start = graph.find_start_node()
    if start is None:
        return []
    outgoing: dict[str, list[str]] = {}
    for e in graph.edges:
        outgoing.setdefault(e.source, []).append(e.target)
    known = {n.id for n in graph.nodes}

    ordered: list[str] = []
    visited: set[str] = set()
    cursor: str | None = start.id
    while cursor is not None and cursor not in visited:
        ordered.append(cursor)
        visited.add(cursor)
        targets = outgoing.get(cursor, [])
        if len(targets) != 1:
            break
        cursor = targets[0] if targets[0] in known else None
    return ordered


def order_labels(graph: FlowGraph) -> list[FlowEdge]:
    """Edges relabeled: "i" on the i-th main-path edge, no label anywhere else."""
    path = main_path(graph)
    order = {(path[i], path[i + 1]): str(i + 1) for i in range(len(path) - 1)}
    labeled: list[FlowEdge] = []
    for e in graph.edges:
        label = order.get((e.source, e.target))
        if e.label != label or e.marker_end != ARROW_CLOSED:
            e = replace(e, label=label, marker_end=ARROW_CLOSED)
        labeled.append(e)
    return labeled


def apply_order_labels(graph: FlowGraph) -> bool:
    """Write recomputed labels into ``graph``. Returns False when nothing changed."""
    labeled = order_labels(graph)
    if labeled == graph.edges:
        return False
    graph.edges = labeled
    return True


class FlowSession:
    """One editable stage graph. All mutation goes through these methods."""

    def __init__(self, session_id: str = "", on_event: EventCallback | None = None) -> None:
        self.session_id = session_id
        self.graph = FlowGraph()
        self._counter = 0
        self._on_event = on_event or (lambda k, d: None)
        self._reset_graph()

    def _new_id(self, kind: str) -> str:
        self._counter += 1
        return f"{kind}-{self._counter}"

    def _reset_graph(self) -> None:
        start = FlowNode(
            id=START_NODE_ID,
            stage=StartStage(label="Start"),
            position=Position(START_POSITION.x, START_POSITION.y),
        )
        self.graph = FlowGraph(nodes=[start], edges=[])

    def _require_node(self, node_id: str) -> FlowNode:
        node = self.graph.get_node(node_id)
        if node is None:
            raise KeyError(f"Node not found: {node_id}")
        return node

    def _changed(self, kind: str, data: dict[str, Any], appended: bool = False) -> None:
        if appended:
            auto_connect(self.graph)
        apply_order_labels(self.graph)
        logger.debug("Session %s: %s %s", self.session_id, kind, data)
        self._on_event(kind, {**data, "graph": self.graph.to_dict()})

    def load_stages(self, stages: list[Stage]) -> FlowGraph:
        """Replace every node except the start node with ``stages``, chained in order."""
        self.graph = assemble_graph(stages, self._new_id, start_node=self.graph.find_start_node())
        self._changed("nodes_loaded", {"count": len(self.graph.nodes)}, appended=True)
        return self.graph

    def append_node(self, stage: Stage, position: Position | None = None) -> FlowNode:
        node = FlowNode(
            id=self._new_id(stage.kind),
            stage=stage,
            position=position or stacked_position(len(self.graph.nodes)),
        )
        self.graph.nodes.append(node)
        self._changed("node_added", {"node_id": node.id}, appended=True)
        return node

    def connect(self, source: str, target: str) -> FlowEdge:
        """Manual connection. An existing (source, target) edge is returned as-is."""
        self._require_node(source)
        self._require_node(target)
        for e in self.graph.edges:
            if e.source == source and e.target == target:
                return e
        edge = FlowEdge(id=edge_id(source, target), source=source, target=target)
        self.graph.edges.append(edge)
        self._changed("edge_added", {"edge_id": edge.id})
        return self.graph.get_edge(edge.id) or edge

    def move_node(self, node_id: str, position: Position) -> FlowNode:
        node = self._require_node(node_id)
        node.position = position
        self._changed("node_moved", {"node_id": node_id})
        return node

    def remove_node(self, node_id: str) -> None:
        """Delete a node and every edge touching it."""
        self._require_node(node_id)
        self.graph.nodes = [n for n in self.graph.nodes if n.id != node_id]
        self.graph.edges = [e for e in self.graph.edges if node_id not in (e.source, e.target)]
        self._changed("node_removed", {"node_id": node_id})

    def remove_edge(self, eid: str) -> None:
        if self.graph.get_edge(eid) is None:
            raise KeyError(f"Edge not found: {eid}")
        self.graph.edges = [e for e in self.graph.edges if e.id != eid]
        self._changed("edge_removed", {"edge_id": eid})

    def reset(self) -> FlowGraph:
        """Back to a single start node and no edges."""
        self._reset_graph()
        logger.info("Session %s reset", self.session_id)
        self._changed("graph_reset", {})
        return self.graph
