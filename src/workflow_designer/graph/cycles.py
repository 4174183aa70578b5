"""
Cycle detection over a directed node/edge set.

Iterative depth-first search with a ``visited`` set and an ``on_stack`` set.
A back edge into a node that is still on the stack means a cycle. Iteration
follows insertion order of nodes and edges, so results are deterministic for
a given construction order.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..errors import GraphTooLargeError


logger = logging.getLogger(__name__)


def build_adjacency(node_ids: Iterable[str], edges: Iterable) -> Dict[str, List[str]]:
    """
    Build an insertion-ordered adjacency map.

    Edge endpoints that are not in ``node_ids`` still get an entry so that
    traversal never fails on a malformed edge list.
    """
    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        source, target = _endpoints(edge)
        adjacency.setdefault(source, []).append(target)
        adjacency.setdefault(target, [])
    return adjacency


def _endpoints(edge) -> Tuple[str, str]:
    if isinstance(edge, dict):
        return edge["source"], edge["target"]
    if isinstance(edge, (tuple, list)):
        return edge[0], edge[1]
    return edge.source, edge.target


def _iter_back_edges(adjacency: Dict[str, List[str]]) -> Iterator[Tuple[str, str]]:
    """Yield every edge that points into a node still on the DFS stack."""
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    # Restart from every unvisited node to cover disconnected components
    for root in adjacency:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        # Frames are (node, index of the next neighbour to explore)
        stack: List[Tuple[str, int]] = [(root, 0)]

        while stack:
            node, index = stack[-1]
            neighbours = adjacency[node]
            if index < len(neighbours):
                stack[-1] = (node, index + 1)
                nxt = neighbours[index]
                if nxt in on_stack:
                    yield node, nxt
                elif nxt not in visited:
                    visited.add(nxt)
                    on_stack.add(nxt)
                    stack.append((nxt, 0))
            else:
                on_stack.discard(node)
                stack.pop()


def has_cycle(
    node_ids: Iterable[str],
    edges: Iterable,
    max_nodes: Optional[int] = None,
) -> bool:
    """
    Return True if the directed edge relation contains at least one cycle.

    Args:
        node_ids: Node ids, in insertion order
        edges: Edges as models, ``{"source", "target"}`` dicts or pairs
        max_nodes: Optional node-count ceiling; larger graphs raise
            GraphTooLargeError instead of being traversed

    Returns:
        True if any directed cycle (a self-loop included) exists
    """
    adjacency = build_adjacency(node_ids, edges)
    if max_nodes is not None and len(adjacency) > max_nodes:
        raise GraphTooLargeError(
            f"Graph has {len(adjacency)} nodes, exceeding the limit of {max_nodes}"
        )

    for source, target in _iter_back_edges(adjacency):
        logger.debug(f"Back edge {source} -> {target} closes a cycle")
        return True
    return False


def find_back_edges(node_ids: Iterable[str], edges: Iterable) -> Set[Tuple[str, str]]:
    """
    Return the ``(source, target)`` pairs that close a cycle.

    Uses the same traversal order as ``has_cycle``. Ignoring the returned
    pairs leaves an acyclic relation; self-loops are always among them.
    """
    return set(_iter_back_edges(build_adjacency(node_ids, edges)))


__all__ = [
    "build_adjacency",
    "find_back_edges",
    "has_cycle",
]
