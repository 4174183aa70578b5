"""Undo/redo history."""
from .manager import DEFAULT_MAX_HISTORY, HistoryManager

__all__ = ["DEFAULT_MAX_HISTORY", "HistoryManager"]
