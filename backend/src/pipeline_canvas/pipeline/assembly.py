"""Turn a parsed stage sequence into canvas nodes chained by edges."""

from __future__ import annotations

from typing import Callable

from .graph import START_NODE_ID, FlowEdge, FlowGraph, FlowNode, Position, edge_id
from .stages import Stage

START_POSITION = Position(x=50, y=80)
COLUMN_X = 100
ROW_Y = 200
ROW_SPACING = 120


def stacked_position(index: int) -> Position:
    """Default slot for the index-th node: one column, rows 120px apart."""
    return Position(x=COLUMN_X, y=ROW_Y + index * ROW_SPACING)


def assemble_graph(
    stages: list[Stage],
    new_id: Callable[[str], str],
    start_node: FlowNode | None = None,
) -> FlowGraph:
    """Build a graph from ``stages``, reusing ``start_node`` when given.

    The parsed start stage is dropped in favour of an existing start node so the
    canvas keeps its entry point; consecutive nodes are joined by edges.
    """
    nodes: list[FlowNode] = []
    if start_node is not None:
        nodes.append(start_node)
    for index, stage in enumerate(stages):
        if stage.kind == "start":
            if start_node is None and not nodes:
                nodes.append(FlowNode(id=START_NODE_ID, stage=stage, position=Position(START_POSITION.x, START_POSITION.y)))
            continue
        nodes.append(FlowNode(id=new_id(stage.kind), stage=stage, position=stacked_position(index)))

    edges = [
        FlowEdge(id=edge_id(a.id, b.id), source=a.id, target=b.id)
        for a, b in zip(nodes, nodes[1:])
    ]
    return FlowGraph(nodes=nodes, edges=edges)
