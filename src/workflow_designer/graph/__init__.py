"""
Workflow graph model.

This package provides:
- WorkflowNode / WorkflowEdge: typed nodes and directed edges
- WorkflowGraph: node/edge collections with referential integrity
- has_cycle: iterative cycle detection
"""

from .models import (
    DEFAULT_POSITION,
    DEFAULT_TASK_TITLE,
    ApprovalNodeData,
    AutomatedNodeData,
    BaseNodeData,
    EndNodeData,
    HistorySnapshot,
    KeyValue,
    NodeKind,
    Position,
    StartNodeData,
    TaskNodeData,
    WorkflowEdge,
    WorkflowNode,
    default_node_data,
    merge_node_data,
    new_id,
    parse_node_data,
)
from .workflow_graph import WorkflowGraph, check_integrity
from .cycles import find_back_edges, has_cycle

__all__ = [
    # Models
    "DEFAULT_POSITION",
    "DEFAULT_TASK_TITLE",
    "ApprovalNodeData",
    "AutomatedNodeData",
    "BaseNodeData",
    "EndNodeData",
    "HistorySnapshot",
    "KeyValue",
    "NodeKind",
    "Position",
    "StartNodeData",
    "TaskNodeData",
    "WorkflowEdge",
    "WorkflowNode",
    "default_node_data",
    "merge_node_data",
    "new_id",
    "parse_node_data",
    # Graph
    "WorkflowGraph",
    "check_integrity",
    # Cycles
    "find_back_edges",
    "has_cycle",
]
