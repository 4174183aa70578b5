"""
Workflow documents - export to and import from versioned JSON.

Import is fail-fast: the first structural violation rejects the whole
document with a SerializationError naming the offending index or id, and
nothing is applied to a live graph.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import GraphIntegrityError, SerializationError
from ..graph.models import NodeKind, WorkflowEdge, WorkflowNode, parse_node_data
from ..graph.workflow_graph import check_integrity


logger = logging.getLogger(__name__)

DOCUMENT_VERSION = "1.0"
DEFAULT_NAME_HINT = "workflow"


class WorkflowDocument(BaseModel):
    """Serialized form of a workflow graph."""
    model_config = ConfigDict(populate_by_name=True)

    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)
    version: str = DOCUMENT_VERSION
    exported_at: Optional[str] = Field(None, alias="exportedAt")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "version": self.version,
        }
        if self.exported_at is not None:
            data["exportedAt"] = self.exported_at
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def export_workflow(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    now: Optional[datetime] = None,
) -> WorkflowDocument:
    """Build an export document. Pure: writes nothing."""
    return WorkflowDocument(
        nodes=list(nodes),
        edges=list(edges),
        version=DOCUMENT_VERSION,
        exported_at=_iso_timestamp(now or _utcnow()),
    )


def document_filename(name_hint: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """File name for an export: ``<prefix>-<YYYY-MM-DD>.json``."""
    moment = (now or _utcnow()).astimezone(timezone.utc)
    return f"{name_hint or DEFAULT_NAME_HINT}-{moment.date().isoformat()}.json"


def _valid_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def validate_workflow_data(data: Any) -> None:
    """
    Structural check of a decoded document.

    Raises:
        SerializationError: On the first violation found
    """
    if not isinstance(data, dict):
        raise SerializationError("Invalid JSON structure")

    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list):
        raise SerializationError('Missing or invalid "nodes" array')
    if not isinstance(edges, list):
        raise SerializationError('Missing or invalid "edges" array')

    for i, node in enumerate(nodes):
        if not isinstance(node, dict) or not _valid_string(node.get("id")):
            raise SerializationError(f'Node at index {i} is missing a valid "id"')
        node_id = node["id"]
        if not _valid_string(node.get("type", node.get("kind"))):
            raise SerializationError(f'Node "{node_id}" is missing a valid "type"')
        if not isinstance(node.get("position"), dict):
            raise SerializationError(f'Node "{node_id}" is missing a valid "position"')

    for i, edge in enumerate(edges):
        if not isinstance(edge, dict) or not _valid_string(edge.get("id")):
            raise SerializationError(f'Edge at index {i} is missing a valid "id"')
        edge_id = edge["id"]
        if not _valid_string(edge.get("source")):
            raise SerializationError(f'Edge "{edge_id}" is missing a valid "source"')
        if not _valid_string(edge.get("target")):
            raise SerializationError(f'Edge "{edge_id}" is missing a valid "target"')


def _invalid_node(node_id: str, error: ValidationError, prefix: tuple = ()) -> SerializationError:
    first = error.errors()[0]
    location = ".".join(str(part) for part in prefix + tuple(first["loc"]))
    return SerializationError(f'Node "{node_id}" is invalid at {location}: {first["msg"]}')


def parse_workflow_document(data: Any) -> WorkflowDocument:
    """
    Validate a decoded document and build typed nodes and edges.

    Raises:
        SerializationError: If the document is malformed or inconsistent
    """
    validate_workflow_data(data)

    nodes: List[WorkflowNode] = []
    for raw in data["nodes"]:
        node_id = raw["id"]
        kind = raw.get("type", raw.get("kind"))
        try:
            NodeKind(kind)
        except ValueError:
            raise SerializationError(f'Node "{node_id}" has unknown type "{kind}"') from None
        try:
            node_data = parse_node_data(kind, raw.get("data"))
        except ValidationError as e:
            raise _invalid_node(node_id, e, prefix=("data",)) from e
        try:
            nodes.append(WorkflowNode.model_validate({**raw, "data": node_data}))
        except ValidationError as e:
            raise _invalid_node(node_id, e) from e

    edges = [
        WorkflowEdge(id=raw["id"], source=raw["source"], target=raw["target"])
        for raw in data["edges"]
    ]

    try:
        check_integrity(nodes, edges)
    except GraphIntegrityError as e:
        raise SerializationError(str(e)) from e

    version = data.get("version")
    exported_at = data.get("exportedAt")
    return WorkflowDocument(
        nodes=nodes,
        edges=edges,
        version=version if isinstance(version, str) else DOCUMENT_VERSION,
        exported_at=exported_at if isinstance(exported_at, str) else None,
    )


def import_workflow(raw_text: str | bytes) -> WorkflowDocument:
    """
    Parse and validate a JSON workflow document.

    Raises:
        SerializationError: If the text is not JSON or fails validation
    """
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SerializationError("Failed to parse JSON file") from e

    document = parse_workflow_document(data)
    logger.info(f"Imported {len(document.nodes)} nodes and {len(document.edges)} edges")
    return document


def write_document(path: Path | str, document: WorkflowDocument) -> Path:
    """Write a document as pretty-printed JSON. Returns the written path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.to_json(), encoding="utf-8")
    logger.info(f"Exported workflow to {path}")
    return path


def read_document(path: Path | str) -> WorkflowDocument:
    """
    Read and import exactly one JSON workflow file.

    Raises:
        SerializationError: If the file cannot be read or is invalid
    """
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SerializationError("Failed to read file") from e
    return import_workflow(raw_text)


__all__ = [
    "DOCUMENT_VERSION",
    "WorkflowDocument",
    "document_filename",
    "export_workflow",
    "import_workflow",
    "parse_workflow_document",
    "read_document",
    "validate_workflow_data",
    "write_document",
]
