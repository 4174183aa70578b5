"""
Workflow Designer

Core of a visual workflow designer: a typed graph of start, task, approval,
automated and end nodes, edited with undo/redo, validated, auto-laid-out,
exported to JSON and simulated on a remote execution service.

Architecture:
- graph/: node/edge model, referential integrity, cycle detection
- validation/: per-node and whole-graph rules
- history/: bounded undo/redo snapshots
- layout/: layered auto-layout
- serialization/: versioned JSON documents
- templates/: built-in graph skeletons
- simulation/, automations/: async clients for the remote collaborators
- editor: WorkflowEditor, which ties all of the above together
"""

from .editor import WorkflowEditor
from .errors import (
    CollaboratorError,
    GraphIntegrityError,
    GraphTooLargeError,
    SerializationError,
    TemplateInstantiationError,
    WorkflowDesignerError,
)
from .graph import NodeKind, Position, WorkflowEdge, WorkflowGraph, WorkflowNode

__version__ = "0.1.0"

__all__ = [
    "CollaboratorError",
    "GraphIntegrityError",
    "GraphTooLargeError",
    "NodeKind",
    "Position",
    "SerializationError",
    "TemplateInstantiationError",
    "WorkflowDesignerError",
    "WorkflowEdge",
    "WorkflowEditor",
    "WorkflowGraph",
    "WorkflowNode",
]
