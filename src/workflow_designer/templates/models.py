"""Template models - reusable graph skeletons with index-based edges."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from ..graph.models import NodeKind, Position


class TemplateNode(BaseModel):
    """A template node: a node body without an id."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: NodeKind = Field(..., alias="type")
    position: Position = Field(default_factory=Position)
    data: Dict[str, Any] = Field(default_factory=dict)


class TemplateEdge(BaseModel):
    """Edge between two template nodes, by array position."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_index: int = Field(..., alias="sourceIndex")
    target_index: int = Field(..., alias="targetIndex")


class WorkflowTemplate(BaseModel):
    """Immutable, named workflow skeleton."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    nodes: List[TemplateNode] = Field(default_factory=list)
    edges: List[TemplateEdge] = Field(default_factory=list)


__all__ = [
    "TemplateEdge",
    "TemplateNode",
    "WorkflowTemplate",
]
