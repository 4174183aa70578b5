"""
Auto-layout - layered (hierarchical) placement of workflow nodes.

1. Back edges found by depth-first search (and self-loops) are ignored, so
   cyclic graphs still get a deterministic layout.
2. Ranks are assigned by longest path from the sources.
3. Nodes inside a rank are ordered by the barycenter of their predecessors.
4. Ranks are stacked along the layout direction with ``rank_sep`` between
   them and nodes are spread across each rank with ``node_sep``, centered.

Returned positions are top-left corners: computed center minus half size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import networkx as nx

from ..graph.cycles import find_back_edges
from ..graph.models import NodeKind, Position, WorkflowEdge, WorkflowNode


logger = logging.getLogger(__name__)


class LayoutDirection(str, Enum):
    """Direction in which ranks are stacked."""
    TOP_TO_BOTTOM = "TB"
    BOTTOM_TO_TOP = "BT"
    LEFT_TO_RIGHT = "LR"
    RIGHT_TO_LEFT = "RL"

    @property
    def is_vertical(self) -> bool:
        return self in (LayoutDirection.TOP_TO_BOTTOM, LayoutDirection.BOTTOM_TO_TOP)

    @property
    def is_reversed(self) -> bool:
        return self in (LayoutDirection.BOTTOM_TO_TOP, LayoutDirection.RIGHT_TO_LEFT)


@dataclass(frozen=True)
class NodeSize:
    width: float
    height: float


DEFAULT_NODE_SIZES: Dict[NodeKind, NodeSize] = {
    NodeKind.START: NodeSize(200, 80),
    NodeKind.END: NodeSize(200, 80),
    NodeKind.TASK: NodeSize(240, 120),
}


@dataclass
class LayoutOptions:
    """Layout parameters; kinds missing from ``sizes`` use the default size."""
    direction: LayoutDirection = LayoutDirection.TOP_TO_BOTTOM
    node_width: float = 220
    node_height: float = 100
    rank_sep: float = 80
    node_sep: float = 50
    sizes: Dict[NodeKind, NodeSize] = field(default_factory=lambda: dict(DEFAULT_NODE_SIZES))

    def __post_init__(self):
        self.direction = LayoutDirection(self.direction)

    def size_of(self, kind: NodeKind) -> NodeSize:
        return self.sizes.get(kind, NodeSize(self.node_width, self.node_height))

    @classmethod
    def from_settings(cls, settings, **overrides) -> "LayoutOptions":
        """Build options from application settings."""
        values = {
            "direction": settings.layout_direction,
            "rank_sep": settings.layout_rank_sep,
            "node_sep": settings.layout_node_sep,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def build_layout_graph(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
) -> nx.DiGraph:
    """
    Build the acyclic graph used for ranking.

    Node insertion order follows ``nodes``; self-loops, back edges and edges
    to unknown nodes are left out.
    """
    graph = nx.DiGraph()
    for index, node in enumerate(nodes):
        graph.add_node(node.id, kind=node.kind, index=index)

    back_edges = find_back_edges([n.id for n in nodes], edges)
    for edge in edges:
        if edge.is_self_loop or (edge.source, edge.target) in back_edges:
            continue
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target)

    if back_edges:
        logger.debug(f"Ignoring {len(back_edges)} back edge(s) for layout")
    return graph


def assign_ranks(graph: nx.DiGraph) -> Dict[str, int]:
    """Longest-path layering: sources get rank 0."""
    ranks: Dict[str, int] = {}
    for node_id in nx.topological_sort(graph):
        ranks[node_id] = max(
            (ranks[pred] + 1 for pred in graph.predecessors(node_id)),
            default=0,
        )
    return ranks


def order_layers(graph: nx.DiGraph, ranks: Dict[str, int]) -> List[List[str]]:
    """Group nodes by rank and order each rank by predecessor barycenter."""
    layer_count = max(ranks.values(), default=-1) + 1
    layers: List[List[str]] = [[] for _ in range(layer_count)]
    for node_id in sorted(ranks, key=lambda n: graph.nodes[n]["index"]):
        layers[ranks[node_id]].append(node_id)

    slot: Dict[str, int] = {node_id: i for i, node_id in enumerate(layers[0])} if layers else {}
    for layer in layers[1:]:
        def barycenter(node_id: str) -> float:
            preds = [slot[p] for p in graph.predecessors(node_id) if p in slot]
            return sum(preds) / len(preds) if preds else 0.0

        layer.sort(key=lambda n: (barycenter(n), graph.nodes[n]["index"]))
        slot.update({node_id: i for i, node_id in enumerate(layer)})

    return layers


def compute_layout(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    options: Optional[LayoutOptions] = None,
) -> Dict[str, Position]:
    """
    Compute a top-left position for every node.

    Never fails on cyclic or disconnected input.
    """
    opts = options or LayoutOptions()
    if not nodes:
        return {}

    graph = build_layout_graph(nodes, edges)
    layers = order_layers(graph, assign_ranks(graph))
    sizes = {node.id: opts.size_of(node.kind) for node in nodes}
    vertical = opts.direction.is_vertical

    def thickness(node_id: str) -> float:
        size = sizes[node_id]
        return size.height if vertical else size.width

    def extent(node_id: str) -> float:
        size = sizes[node_id]
        return size.width if vertical else size.height

    # Rank axis: stack ranks with rank_sep between their thickest members
    rank_centers: List[float] = []
    offset = 0.0
    for layer in layers:
        thick = max(thickness(n) for n in layer)
        rank_centers.append(offset + thick / 2)
        offset += thick + opts.rank_sep
    span = offset - opts.rank_sep
    if opts.direction.is_reversed:
        rank_centers = [span - center for center in rank_centers]

    # Cross axis: spread each rank around 0
    centers: Dict[str, tuple[float, float]] = {}
    for rank_center, layer in zip(rank_centers, layers):
        total = sum(extent(n) for n in layer) + opts.node_sep * (len(layer) - 1)
        cursor = -total / 2
        for node_id in layer:
            cross_center = cursor + extent(node_id) / 2
            cursor += extent(node_id) + opts.node_sep
            if vertical:
                centers[node_id] = (cross_center, rank_center)
            else:
                centers[node_id] = (rank_center, cross_center)

    min_x = min(cx - sizes[n].width / 2 for n, (cx, _) in centers.items())
    min_y = min(cy - sizes[n].height / 2 for n, (_, cy) in centers.items())

    return {
        node_id: Position(
            x=cx - sizes[node_id].width / 2 - min_x,
            y=cy - sizes[node_id].height / 2 - min_y,
        )
        for node_id, (cx, cy) in centers.items()
    }


def apply_auto_layout(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    options: Optional[LayoutOptions] = None,
) -> List[WorkflowNode]:
    """
    Return copies of ``nodes`` (same order) with laid-out positions.

    The input nodes are not modified.
    """
    positions = compute_layout(nodes, edges, options)
    return [node.with_position(positions[node.id]) for node in nodes]


__all__ = [
    "DEFAULT_NODE_SIZES",
    "LayoutDirection",
    "LayoutOptions",
    "NodeSize",
    "apply_auto_layout",
    "assign_ranks",
    "build_layout_graph",
    "compute_layout",
    "order_layers",
]
