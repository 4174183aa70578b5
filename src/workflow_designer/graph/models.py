"""
Workflow Models - typed nodes and edges of a workflow graph.

Node ``data`` is a tagged union over the five node kinds. The tag lives on
the node (``type`` on the wire), and the record model is chosen from it.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


def new_id() -> str:
    """Generate a fresh unique id for a node or edge."""
    return uuid.uuid4().hex


class NodeKind(str, Enum):
    """Discriminant tag of a workflow node."""
    START = "start"
    TASK = "task"
    APPROVAL = "approval"
    AUTOMATED = "automated"
    END = "end"


class Position(BaseModel):
    """Node position in the canvas."""
    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0


class KeyValue(BaseModel):
    """Free-form key/value pair attached to a task."""
    key: str
    value: str


class BaseNodeData(BaseModel):
    """Fields shared by every node kind."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class StartNodeData(BaseNodeData):
    title: str = "Start"


class TaskNodeData(BaseNodeData):
    title: str = ""
    description: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    custom_fields: Optional[List[KeyValue]] = Field(None, alias="customFields")


class ApprovalNodeData(BaseNodeData):
    title: str = ""
    approver_role: Optional[str] = Field(None, alias="approverRole")
    auto_approve_threshold: Optional[float] = Field(None, alias="autoApproveThreshold")


class AutomatedNodeData(BaseNodeData):
    title: str = ""
    action_id: Optional[str] = Field(None, alias="actionId")
    action_params: Dict[str, str] = Field(default_factory=dict, alias="actionParams")


class EndNodeData(BaseNodeData):
    end_message: Optional[str] = Field(None, alias="endMessage")
    summary: Optional[bool] = None


NodeData = Union[StartNodeData, TaskNodeData, ApprovalNodeData, AutomatedNodeData, EndNodeData]

DATA_MODELS: Dict[NodeKind, Type[BaseNodeData]] = {
    NodeKind.START: StartNodeData,
    NodeKind.TASK: TaskNodeData,
    NodeKind.APPROVAL: ApprovalNodeData,
    NodeKind.AUTOMATED: AutomatedNodeData,
    NodeKind.END: EndNodeData,
}

DEFAULT_POSITION = Position(x=50, y=50)

# Placeholder title seeded into new task nodes
DEFAULT_TASK_TITLE = "New Task"

_DEFAULT_DATA: Dict[NodeKind, Dict[str, Any]] = {
    NodeKind.START: {"title": "Start"},
    NodeKind.TASK: {"title": DEFAULT_TASK_TITLE, "assignee": "", "description": ""},
    NodeKind.APPROVAL: {"title": "Approval", "approverRole": "Manager", "autoApproveThreshold": 0},
    NodeKind.AUTOMATED: {"title": "Automated Step", "actionId": "", "actionParams": {}},
    NodeKind.END: {"title": "End", "endMessage": ""},
}


def default_node_data(kind: NodeKind | str) -> BaseNodeData:
    """Build the data record seeded into a freshly added node."""
    kind = NodeKind(kind)
    return DATA_MODELS[kind].model_validate(_DEFAULT_DATA[kind])


def parse_node_data(kind: NodeKind | str, raw: Any) -> BaseNodeData:
    """Parse a raw data record against the model selected by ``kind``."""
    model = DATA_MODELS[NodeKind(kind)]
    if isinstance(raw, model):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True, exclude_none=True)
    return model.model_validate(raw or {})


def merge_node_data(data: BaseNodeData, patch: Dict[str, Any]) -> BaseNodeData:
    """
    Shallow-merge ``patch`` into ``data`` and return a new record.

    Patch keys may be wire names (``approverRole``) or field names
    (``approver_role``). The merged record is validated against the same
    kind's model, so an invalid patch raises ``ValidationError``.
    """
    model = type(data)
    fields = model.model_fields
    normalized: Dict[str, Any] = {}
    for key, value in patch.items():
        field = fields.get(key)
        normalized[(field.alias or key) if field else key] = value

    merged = {**data.model_dump(by_alias=True), **normalized}
    return model.model_validate(merged)


class WorkflowNode(BaseModel):
    """A node in a workflow graph."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    kind: NodeKind = Field(..., alias="type")
    position: Position = Field(default_factory=Position)
    data: NodeData

    @model_validator(mode="before")
    @classmethod
    def _dispatch_data(cls, values: Any) -> Any:
        """Parse ``data`` with the record model of the node's kind."""
        if not isinstance(values, dict):
            return values
        kind = values.get("type", values.get("kind"))
        try:
            kind = NodeKind(kind)
        except ValueError:
            # Let field validation report the unknown kind
            return values
        values = dict(values)
        values["data"] = parse_node_data(kind, values.get("data"))
        return values

    def with_data(self, data: BaseNodeData) -> "WorkflowNode":
        return self.model_copy(update={"data": data})

    def with_position(self, position: Position) -> "WorkflowNode":
        return self.model_copy(update={"position": position})

    def to_dict(self) -> Dict[str, Any]:
        """Wire form of the node (camelCase keys, empty fields dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WorkflowEdge(BaseModel):
    """Directed edge between two nodes."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    source: str
    target: str

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class HistorySnapshot(BaseModel):
    """Independent copy of the full node/edge state at one point in time."""

    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)

    def copy_deep(self) -> "HistorySnapshot":
        return self.model_copy(deep=True)


__all__ = [
    "ApprovalNodeData",
    "AutomatedNodeData",
    "BaseNodeData",
    "DATA_MODELS",
    "DEFAULT_POSITION",
    "DEFAULT_TASK_TITLE",
    "EndNodeData",
    "HistorySnapshot",
    "KeyValue",
    "NodeData",
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
]
