"""
Undo/redo history over workflow graph snapshots.

Classic linear editor history: a new snapshot after an undo discards all
forward (redo) entries. ``current`` is kept up to date by the caller through
``update_current_state`` and is independent of the two stacks.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..graph.models import HistorySnapshot, WorkflowEdge, WorkflowNode


logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 50


class HistoryManager:
    """
    Bounded past/future stacks of deep graph snapshots.

    Usage:
        history = HistoryManager(max_history=50)
        history.update_current_state(graph.nodes, graph.edges)

        history.take_snapshot()      # before the mutation
        graph.remove_node(node_id)
        history.update_current_state(graph.nodes, graph.edges)

        previous = history.undo()    # caller applies the returned state
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        if max_history <= 0:
            raise ValueError("max_history must be positive")
        self.max_history = max_history
        self._past: List[HistorySnapshot] = []
        self._future: List[HistorySnapshot] = []
        self._current = HistorySnapshot()

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def history_length(self) -> int:
        return len(self._past)

    @property
    def future_length(self) -> int:
        return len(self._future)

    @property
    def current(self) -> HistorySnapshot:
        return self._current.copy_deep()

    def update_current_state(
        self,
        nodes: Iterable[WorkflowNode],
        edges: Iterable[WorkflowEdge],
    ) -> None:
        """Record the latest graph state (call after every change)."""
        self._current = HistorySnapshot(nodes=list(nodes), edges=list(edges)).copy_deep()

    def take_snapshot(self) -> None:
        """
        Push a copy of the current state onto the past stack.

        Evicts the oldest entry beyond ``max_history`` and clears the
        future stack.
        """
        self._past.append(self._current.copy_deep())
        if len(self._past) > self.max_history:
            del self._past[: len(self._past) - self.max_history]
        self._future.clear()
        logger.debug(f"Snapshot taken (past={len(self._past)})")

    def undo(self) -> Optional[HistorySnapshot]:
        """
        Step back one state.

        Returns:
            The state to apply, or None if there is nothing to undo
        """
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.insert(0, self._current.copy_deep())
        return previous.copy_deep()

    def redo(self) -> Optional[HistorySnapshot]:
        """
        Step forward one state.

        Returns:
            The state to apply, or None if there is nothing to redo
        """
        if not self._future:
            return None
        following = self._future.pop(0)
        self._past.append(self._current.copy_deep())
        if len(self._past) > self.max_history:
            del self._past[: len(self._past) - self.max_history]
        return following.copy_deep()

    def clear_history(self) -> None:
        """Empty both stacks."""
        self._past.clear()
        self._future.clear()


__all__ = [
    "DEFAULT_MAX_HISTORY",
    "HistoryManager",
]
