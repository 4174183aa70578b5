"""Automatic layered layout."""
from .auto_layout import (
    DEFAULT_NODE_SIZES,
    LayoutDirection,
    LayoutOptions,
    NodeSize,
    apply_auto_layout,
    compute_layout,
)

__all__ = [
    "DEFAULT_NODE_SIZES",
    "LayoutDirection",
    "LayoutOptions",
    "NodeSize",
    "apply_auto_layout",
    "compute_layout",
]
