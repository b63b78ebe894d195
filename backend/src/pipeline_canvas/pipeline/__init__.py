"""Pipeline stage core: stage model, script parsers, graph sequencer."""

from .stages import Stage, StartStage, PALETTE, STAGE_KINDS, default_label, display_label, stage_from_dict
from .graph import FlowGraph, FlowNode, FlowEdge, Position
from .workflow_parser import parse_workflow
from .shell_parser import parse_shell
from .sequencer import FlowSession, auto_connect, main_path, apply_order_labels

__all__ = [
    "Stage",
    "StartStage",
    "PALETTE",
    "STAGE_KINDS",
    "default_label",
    "display_label",
    "stage_from_dict",
    "FlowGraph",
    "FlowNode",
    "FlowEdge",
    "Position",
    "parse_workflow",
    "parse_shell",
    "FlowSession",
    "auto_connect",
    "main_path",
    "apply_order_labels",
]
