"""
Workflow Editor - composition root for one editing session.

Owns the graph and its undo history and routes every user action through
one method. Mutating methods snapshot history strictly before the change and
refresh the history's current state right after it; a failed operation leaves
both graph and history untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .automations import AutomationCatalog
from .config import Settings, get_settings
from .graph import (
    HistorySnapshot,
    NodeKind,
    Position,
    WorkflowEdge,
    WorkflowGraph,
    check_integrity,
    merge_node_data,
)
from .history import HistoryManager
from .layout import LayoutDirection, LayoutOptions, compute_layout
from .observability import get_logger
from .serialization import (
    WorkflowDocument,
    document_filename,
    export_workflow,
    import_workflow,
    read_document,
    write_document,
)
from .simulation import ExecutionClient, SimulationAdapter, SimulationOutcome
from .templates import WorkflowTemplate, get_template, instantiate_template
from .validation import (
    ValidationResults,
    get_workflow_errors,
    is_workflow_valid,
    validate_workflow,
)


logger = logging.getLogger(__name__)

# Horizontal shift applied to a template dropped onto a non-empty canvas
TEMPLATE_OFFSET_X = 400


class WorkflowEditor:
    """
    One workflow being edited.

    Usage:
        editor = WorkflowEditor()
        editor.apply_template("basic-approval")
        editor.auto_layout()
        assert editor.is_valid
        outcome = await editor.simulate()
        editor.undo()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        history: Optional[HistoryManager] = None,
        catalog: Optional[AutomationCatalog] = None,
        execution_client: Optional[ExecutionClient] = None,
    ):
        self.settings = settings or get_settings()
        self.graph = WorkflowGraph()
        self.history = history or HistoryManager(max_history=self.settings.history_max)
        self.catalog = catalog or AutomationCatalog()
        self.simulator = SimulationAdapter(
            client=execution_client,
            max_nodes=self.settings.max_graph_nodes,
        )
        self._sync_history()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def nodes(self):
        return self.graph.nodes

    @property
    def edges(self):
        return self.graph.edges

    @property
    def validation_results(self) -> ValidationResults:
        return validate_workflow(self.graph.nodes, self.graph.edges)

    @property
    def workflow_errors(self) -> List[str]:
        return get_workflow_errors(self.graph.nodes)

    @property
    def is_valid(self) -> bool:
        return is_workflow_valid(self.graph.nodes, self.graph.edges)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _sync_history(self) -> None:
        self.history.update_current_state(self.graph.nodes, self.graph.edges)

    def _apply(self, snapshot: HistorySnapshot) -> None:
        self.graph.replace(snapshot.nodes, snapshot.edges)
        self._sync_history()

    def add_node(self, kind: NodeKind | str, position: Position | Dict[str, float] | None = None) -> str:
        kind = NodeKind(kind)
        self.history.take_snapshot()
        node_id = self.graph.add_node(kind, position)
        self._sync_history()
        return node_id

    def update_node_data(self, node_id: str, patch: Dict[str, Any]) -> None:
        node = self.graph.get_node(node_id)
        if node is None:
            return
        # Validate the merge before touching history
        merge_node_data(node.data, patch)

        self.history.take_snapshot()
        self.graph.update_node_data(node_id, patch)
        self._sync_history()

    def move_node(self, node_id: str, position: Position | Dict[str, float]) -> None:
        if self.graph.get_node(node_id) is None:
            return
        self.history.take_snapshot()
        self.graph.move_node(node_id, position)
        self._sync_history()

    def remove_node(self, node_id: str) -> None:
        if self.graph.get_node(node_id) is None:
            return
        self.history.take_snapshot()
        self.graph.remove_node(node_id)
        self._sync_history()

    def connect(self, source: str, target: str, edge_id: Optional[str] = None) -> str:
        """Add an edge; raises GraphIntegrityError for unknown endpoints."""
        edge = WorkflowEdge(source=source, target=target, **({"id": edge_id} if edge_id else {}))
        check_integrity(self.graph.nodes, self.graph.edges + (edge,))

        self.history.take_snapshot()
        self.graph.add_edge(edge)
        self._sync_history()
        return edge.id

    def remove_edge(self, edge_id: str) -> None:
        if self.graph.get_edge(edge_id) is None:
            return
        self.history.take_snapshot()
        self.graph.remove_edge(edge_id)
        self._sync_history()

    def auto_layout(
        self,
        direction: LayoutDirection | str | None = None,
        rank_sep: Optional[float] = None,
        node_sep: Optional[float] = None,
    ) -> bool:
        """
        Lay out every node.

        Returns:
            False if there was nothing to lay out
        """
        if not self.graph.nodes:
            logger.info("No nodes to layout")
            return False
        options = LayoutOptions.from_settings(
            self.settings,
            direction=direction,
            rank_sep=rank_sep,
            node_sep=node_sep,
        )
        positions = compute_layout(self.graph.nodes, self.graph.edges, options)

        self.history.take_snapshot()
        self.graph.set_positions(positions)
        self._sync_history()
        logger.info(f"Auto-layout applied ({options.direction.value}) to {len(positions)} nodes")
        return True

    def apply_template(self, template: WorkflowTemplate | str) -> List[str]:
        """
        Add a fresh copy of a template to the canvas.

        Returns:
            Ids of the added nodes
        """
        if isinstance(template, str):
            template = get_template(template)
        instance = instantiate_template(template)

        offset_x = TEMPLATE_OFFSET_X if self.graph.nodes else 0
        nodes = [
            node.with_position(Position(x=node.position.x + offset_x, y=node.position.y))
            for node in instance.nodes
        ]

        all_nodes = self.graph.nodes + tuple(nodes)
        all_edges = self.graph.edges + tuple(instance.edges)
        check_integrity(all_nodes, all_edges)

        self.history.take_snapshot()
        self.graph.replace(all_nodes, all_edges)
        self._sync_history()

        log = get_logger(__name__, template_id=template.id)
        log.info(f'Applied "{template.name}" template')
        return [node.id for node in nodes]

    def import_document(self, raw_text: str | bytes) -> WorkflowDocument:
        """
        Replace the graph with an imported document.

        Raises:
            SerializationError: The graph and history are left unchanged
        """
        document = import_workflow(raw_text)

        self.history.take_snapshot()
        self.graph.replace(document.nodes, document.edges)
        self._sync_history()
        return document

    def import_file(self, path: Path | str) -> WorkflowDocument:
        document = read_document(path)
        self.history.take_snapshot()
        self.graph.replace(document.nodes, document.edges)
        self._sync_history()
        return document

    def clear(self) -> None:
        self.history.take_snapshot()
        self.graph.clear()
        self._sync_history()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._apply(snapshot)
        logger.debug("Undo")
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._apply(snapshot)
        logger.debug("Redo")
        return True

    # ------------------------------------------------------------------
    # Export / simulation
    # ------------------------------------------------------------------

    def export_document(self, now: Optional[datetime] = None) -> WorkflowDocument:
        return export_workflow(self.graph.nodes, self.graph.edges, now=now)

    def export_to(self, directory: Path | str, now: Optional[datetime] = None) -> Path:
        """Write ``<export_prefix>-<date>.json`` into ``directory``."""
        document = self.export_document(now=now)
        filename = document_filename(self.settings.export_prefix, now=now)
        return write_document(Path(directory) / filename, document)

    async def simulate(self) -> SimulationOutcome:
        return await self.simulator.run(self.graph.nodes, self.graph.edges)


__all__ = [
    "TEMPLATE_OFFSET_X",
    "WorkflowEditor",
]
