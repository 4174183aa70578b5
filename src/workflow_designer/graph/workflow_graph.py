"""
Workflow Graph - owns the node/edge collections of one workflow.

Collections are held as tuples and every operation swaps in a new tuple,
so a caller holding an earlier ``nodes``/``edges`` value never sees it change.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import GraphIntegrityError
from .models import (
    DEFAULT_POSITION,
    HistorySnapshot,
    NodeKind,
    Position,
    WorkflowEdge,
    WorkflowNode,
    default_node_data,
    merge_node_data,
    new_id,
)


logger = logging.getLogger(__name__)


class WorkflowGraph:
    """
    Node and edge collections with referential integrity.

    Invariants:
    - node ids and edge ids are unique
    - every edge's source and target name an existing node
      (removing a node cascades to its edges)

    Usage:
        graph = WorkflowGraph()
        start = graph.add_node("start")
        end = graph.add_node("end", {"x": 50, "y": 200})
        graph.add_edge({"source": start, "target": end})
    """

    def __init__(
        self,
        nodes: Iterable[WorkflowNode] = (),
        edges: Iterable[WorkflowEdge] = (),
    ):
        self._nodes: Tuple[WorkflowNode, ...] = ()
        self._edges: Tuple[WorkflowEdge, ...] = ()
        self.replace(nodes, edges)

    @property
    def nodes(self) -> Tuple[WorkflowNode, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[WorkflowEdge, ...]:
        return self._edges

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self._nodes]

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        """Get node by id."""
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[WorkflowEdge]:
        """Get edge by id."""
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    # ------------------------------------------------------------------
    # Node operations
    # ------------------------------------------------------------------

    def add_node(
        self,
        kind: NodeKind | str,
        position: Position | Dict[str, float] | None = None,
    ) -> str:
        """
        Add a node of ``kind`` with the kind's default data.

        Returns:
            The fresh node id
        """
        kind = NodeKind(kind)
        node = WorkflowNode(
            id=new_id(),
            kind=kind,
            position=_as_position(position) if position is not None else DEFAULT_POSITION,
            data=default_node_data(kind),
        )
        self._nodes = self._nodes + (node,)
        logger.debug(f"Added {kind.value} node {node.id}")
        return node.id

    def add_nodes(self, nodes: Iterable[WorkflowNode]) -> None:
        """Append fully-formed nodes (e.g. an instantiated template)."""
        new_nodes = tuple(nodes)
        existing = set(self.node_ids)
        for node in new_nodes:
            if node.id in existing:
                raise GraphIntegrityError(f"Duplicate node id: {node.id}")
            existing.add(node.id)
        self._nodes = self._nodes + new_nodes

    def update_node_data(self, node_id: str, patch: Dict[str, Any]) -> None:
        """
        Shallow-merge ``patch`` into the node's data.

        No-op if the node does not exist. Raises ``ValidationError`` (and
        changes nothing) if the merged record is invalid for the node's kind.
        """
        updated = []
        found = False
        for node in self._nodes:
            if node.id == node_id:
                node = node.with_data(merge_node_data(node.data, patch))
                found = True
            updated.append(node)
        if found:
            self._nodes = tuple(updated)
            logger.debug(f"Updated data of node {node_id}: {sorted(patch)}")

    def move_node(self, node_id: str, position: Position | Dict[str, float]) -> None:
        """Set a node's position. No-op if the node does not exist."""
        position = _as_position(position)
        self._nodes = tuple(
            node.with_position(position) if node.id == node_id else node
            for node in self._nodes
        )

    def set_positions(self, positions: Dict[str, Position]) -> None:
        """Apply many positions at once (used by auto-layout)."""
        self._nodes = tuple(
            node.with_position(positions[node.id]) if node.id in positions else node
            for node in self._nodes
        )

    def remove_node(self, node_id: str) -> None:
        """
        Remove a node and every edge touching it.

        Removing an unknown id is a no-op.
        """
        if self.get_node(node_id) is None:
            return
        self._nodes = tuple(node for node in self._nodes if node.id != node_id)
        kept = tuple(
            edge for edge in self._edges
            if edge.source != node_id and edge.target != node_id
        )
        removed = len(self._edges) - len(kept)
        self._edges = kept
        logger.debug(f"Removed node {node_id} and {removed} edge(s)")

    # ------------------------------------------------------------------
    # Edge operations
    # ------------------------------------------------------------------

    def add_edge(self, edge: WorkflowEdge | Dict[str, Any]) -> str:
        """
        Append an edge, assigning a fresh id if it has none.

        Raises:
            GraphIntegrityError: If an endpoint is unknown or the id is taken

        Returns:
            The edge id
        """
        if isinstance(edge, dict):
            payload = dict(edge)
            if not payload.get("id"):
                payload.pop("id", None)
            edge = WorkflowEdge.model_validate(payload)

        node_ids = set(self.node_ids)
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                raise GraphIntegrityError(
                    f"Edge {edge.id} references unknown node: {endpoint}"
                )
        if self.get_edge(edge.id) is not None:
            raise GraphIntegrityError(f"Duplicate edge id: {edge.id}")

        self._edges = self._edges + (edge,)
        logger.debug(f"Added edge {edge.id}: {edge.source} -> {edge.target}")
        return edge.id

    def remove_edge(self, edge_id: str) -> None:
        """Remove an edge. No-op if unknown."""
        self._edges = tuple(edge for edge in self._edges if edge.id != edge_id)

    # ------------------------------------------------------------------
    # Whole-graph operations
    # ------------------------------------------------------------------

    def replace(self, nodes: Iterable[WorkflowNode], edges: Iterable[WorkflowEdge]) -> None:
        """
        Replace both collections after checking integrity.

        Raises:
            GraphIntegrityError: On duplicate ids or dangling edges; the
                graph is left unchanged
        """
        nodes = tuple(nodes)
        edges = tuple(edges)
        check_integrity(nodes, edges)
        self._nodes = nodes
        self._edges = edges

    def snapshot(self) -> HistorySnapshot:
        """Deep, independent copy of the current state."""
        return HistorySnapshot(nodes=list(self._nodes), edges=list(self._edges)).copy_deep()

    def clear(self) -> None:
        self._nodes = ()
        self._edges = ()


def check_integrity(nodes: Iterable[WorkflowNode], edges: Iterable[WorkflowEdge]) -> None:
    """Raise GraphIntegrityError on duplicate ids or dangling edges."""
    node_ids = set()
    for node in nodes:
        if node.id in node_ids:
            raise GraphIntegrityError(f"Duplicate node id: {node.id}")
        node_ids.add(node.id)

    edge_ids = set()
    for edge in edges:
        if edge.id in edge_ids:
            raise GraphIntegrityError(f"Duplicate edge id: {edge.id}")
        edge_ids.add(edge.id)
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                raise GraphIntegrityError(
                    f"Edge {edge.id} references unknown node: {endpoint}"
                )


def _as_position(position: Position | Dict[str, float]) -> Position:
    if isinstance(position, Position):
        return position
    return Position.model_validate(position)


__all__ = [
    "WorkflowGraph",
    "check_integrity",
]
