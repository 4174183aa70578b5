"""Tests for cycle detection."""
import pytest

from workflow_designer.errors import GraphTooLargeError
from workflow_designer.graph import find_back_edges, has_cycle
from workflow_designer.graph.cycles import build_adjacency


class TestHasCycle:
    """Test has_cycle over pairs, dicts and edge models."""

    def test_empty_graph(self):
        assert has_cycle([], []) is False

    def test_chain_is_acyclic(self):
        assert has_cycle(["a", "b", "c"], [("a", "b"), ("b", "c")]) is False

    def test_diamond_is_acyclic(self):
        edges = [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")]

        assert has_cycle(["a", "b", "c", "d"], edges) is False

    def test_back_edge_is_cycle(self):
        edges = [{"source": "a", "target": "b"}, {"source": "b", "target": "a"}]

        assert has_cycle(["a", "b"], edges) is True

    def test_self_loop_is_cycle(self):
        assert has_cycle(["a"], [("a", "a")]) is True

    def test_cycle_in_disconnected_component(self):
        edges = [("a", "b"), ("x", "y"), ("y", "z"), ("z", "x")]

        assert has_cycle(["a", "b", "x", "y", "z"], edges) is True

    def test_edge_models(self, linear_workflow, make_edge):
        nodes, edges = linear_workflow
        ids = [n.id for n in nodes]

        assert has_cycle(ids, edges) is False
        assert has_cycle(ids, edges + [make_edge("end", "start")]) is True

    def test_deep_chain_does_not_recurse(self):
        ids = [f"n{i}" for i in range(5000)]
        edges = list(zip(ids, ids[1:]))

        assert has_cycle(ids, edges) is False
        assert has_cycle(ids, edges + [(ids[-1], ids[0])]) is True

    def test_node_ceiling(self):
        ids = [f"n{i}" for i in range(11)]

        with pytest.raises(GraphTooLargeError):
            has_cycle(ids, [], max_nodes=10)

        assert has_cycle(ids, [], max_nodes=11) is False


class TestFindBackEdges:
    """Test back-edge discovery used by auto-layout."""

    def test_acyclic_has_none(self):
        assert find_back_edges(["a", "b"], [("a", "b")]) == set()

    def test_loop_back_edge(self):
        edges = [("a", "b"), ("b", "c"), ("c", "a")]

        assert find_back_edges(["a", "b", "c"], edges) == {("c", "a")}

    def test_self_loops_included(self):
        assert find_back_edges(["a"], [("a", "a")]) == {("a", "a")}

    def test_dangling_endpoint_gets_entry(self):
        adjacency = build_adjacency(["a"], [("a", "ghost")])

        assert adjacency == {"a": ["ghost"], "ghost": []}
