"""Tests for workflow node/edge models and the WorkflowGraph container."""
import pytest
from pydantic import ValidationError

from workflow_designer.errors import GraphIntegrityError
from workflow_designer.graph import (
    DEFAULT_POSITION,
    ApprovalNodeData,
    AutomatedNodeData,
    NodeKind,
    Position,
    TaskNodeData,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    default_node_data,
    merge_node_data,
)


class TestNodeModels:
    """Test typed node data."""

    def test_data_model_follows_node_type(self):
        node = WorkflowNode.model_validate({
            "id": "a1",
            "type": "approval",
            "position": {"x": 1, "y": 2},
            "data": {"title": "Review", "approverRole": "Manager", "autoApproveThreshold": 3},
        })

        assert node.kind == NodeKind.APPROVAL
        assert isinstance(node.data, ApprovalNodeData)
        assert node.data.approver_role == "Manager"
        assert node.data.auto_approve_threshold == 3

    def test_wire_form_uses_camel_case(self, make_node):
        node = make_node("t1", "task", title="Fill form", dueDate="2024-06-01",
                         customFields=[{"key": "team", "value": "ops"}])

        wire = node.to_dict()

        assert wire["type"] == "task"
        assert wire["data"]["dueDate"] == "2024-06-01"
        assert wire["data"]["customFields"] == [{"key": "team", "value": "ops"}]
        assert "kind" not in wire

    def test_unknown_data_keys_are_kept(self, make_node):
        node = make_node("s", "start", title="Go", color="blue")

        assert node.to_dict()["data"]["color"] == "blue"

    def test_unknown_node_type_rejected(self):
        with pytest.raises(ValidationError):
            WorkflowNode.model_validate({"id": "x", "type": "decision", "data": {}})

    def test_nodes_are_immutable(self, make_node):
        node = make_node("s", "start")

        with pytest.raises(ValidationError):
            node.id = "other"

    @pytest.mark.parametrize("kind,title", [
        ("start", "Start"),
        ("task", "New Task"),
        ("approval", "Approval"),
        ("automated", "Automated Step"),
        ("end", "End"),
    ])
    def test_default_data(self, kind, title):
        assert default_node_data(kind).title == title

    def test_default_approval_data(self):
        data = default_node_data(NodeKind.APPROVAL)

        assert data.approver_role == "Manager"
        assert data.auto_approve_threshold == 0


class TestMergeNodeData:
    """Test shallow merge of data patches."""

    def test_merge_accepts_wire_and_field_names(self):
        data = default_node_data("approval")

        merged = merge_node_data(data, {"approverRole": "CFO", "auto_approve_threshold": 5})

        assert merged.approver_role == "CFO"
        assert merged.auto_approve_threshold == 5
        assert merged.title == "Approval"
        # Original untouched
        assert data.approver_role == "Manager"

    def test_merge_replaces_nested_values(self):
        data = AutomatedNodeData.model_validate({"actionParams": {"a": "1", "b": "2"}})

        merged = merge_node_data(data, {"actionParams": {"c": "3"}})

        assert merged.action_params == {"c": "3"}

    def test_invalid_patch_raises(self):
        data = default_node_data("task")

        with pytest.raises(ValidationError):
            merge_node_data(data, {"customFields": "not-a-list"})


class TestWorkflowGraph:
    """Test graph operations and referential integrity."""

    def test_add_node_uses_defaults(self):
        graph = WorkflowGraph()

        node_id = graph.add_node("task")
        node = graph.get_node(node_id)

        assert node.position == DEFAULT_POSITION
        assert isinstance(node.data, TaskNodeData)
        assert node.data.title == "New Task"
        assert len(graph) == 1

    def test_add_node_ids_are_unique(self):
        graph = WorkflowGraph()

        ids = {graph.add_node("task") for _ in range(20)}

        assert len(ids) == 20

    def test_add_node_at_position(self):
        graph = WorkflowGraph()

        node_id = graph.add_node("end", {"x": 10, "y": 20})

        assert graph.get_node(node_id).position == Position(x=10, y=20)

    def test_update_node_data_merges(self):
        graph = WorkflowGraph()
        node_id = graph.add_node("task")

        graph.update_node_data(node_id, {"title": "Sign contract", "assignee": "Bob"})
        data = graph.get_node(node_id).data

        assert data.title == "Sign contract"
        assert data.assignee == "Bob"
        assert data.description == ""

    def test_update_unknown_node_is_noop(self):
        graph = WorkflowGraph()
        graph.add_node("start")
        before = graph.nodes

        graph.update_node_data("missing", {"title": "x"})

        assert graph.nodes == before

    def test_invalid_update_leaves_node_unchanged(self):
        graph = WorkflowGraph()
        node_id = graph.add_node("approval")

        with pytest.raises(ValidationError):
            graph.update_node_data(node_id, {"autoApproveThreshold": "lots"})

        assert graph.get_node(node_id).data.auto_approve_threshold == 0

    def test_remove_node_cascades_to_edges(self):
        graph = WorkflowGraph()
        a = graph.add_node("start")
        b = graph.add_node("task")
        c = graph.add_node("end")
        graph.add_edge({"source": a, "target": b})
        graph.add_edge({"source": b, "target": c})
        graph.add_edge({"source": a, "target": c})

        graph.remove_node(b)

        assert graph.node_ids == [a, c]
        assert [(e.source, e.target) for e in graph.edges] == [(a, c)]

    def test_remove_unknown_node_is_noop(self):
        graph = WorkflowGraph()
        graph.add_node("start")

        graph.remove_node("missing")
        graph.remove_node("missing")

        assert len(graph) == 1

    def test_add_edge_assigns_id(self):
        graph = WorkflowGraph()
        a = graph.add_node("start")
        b = graph.add_node("end")

        edge_id = graph.add_edge({"source": a, "target": b})

        assert edge_id
        assert graph.get_edge(edge_id).source == a

    def test_add_edge_to_unknown_node_raises(self):
        graph = WorkflowGraph()
        a = graph.add_node("start")

        with pytest.raises(GraphIntegrityError) as exc_info:
            graph.add_edge({"source": a, "target": "ghost"})

        assert "ghost" in str(exc_info.value)
        assert graph.edges == ()

    def test_duplicate_edge_id_raises(self):
        graph = WorkflowGraph()
        a = graph.add_node("start")
        b = graph.add_node("end")
        graph.add_edge(WorkflowEdge(id="e1", source=a, target=b))

        with pytest.raises(GraphIntegrityError):
            graph.add_edge(WorkflowEdge(id="e1", source=b, target=a))

    def test_self_loop_allowed(self):
        graph = WorkflowGraph()
        a = graph.add_node("task")

        edge_id = graph.add_edge({"source": a, "target": a})

        assert graph.get_edge(edge_id).is_self_loop

    def test_earlier_collections_never_change(self):
        graph = WorkflowGraph()
        a = graph.add_node("start")
        nodes_before = graph.nodes

        graph.move_node(a, {"x": 500, "y": 500})

        assert nodes_before[0].position == DEFAULT_POSITION
        assert graph.nodes[0].position == Position(x=500, y=500)

    def test_replace_rejects_dangling_edges(self, linear_workflow, make_edge):
        nodes, edges = linear_workflow
        graph = WorkflowGraph(nodes, edges)

        with pytest.raises(GraphIntegrityError):
            graph.replace(nodes, edges + [make_edge("end", "nowhere")])

        assert len(graph.edges) == len(edges)

    def test_snapshot_is_independent(self, linear_workflow):
        graph = WorkflowGraph(*linear_workflow)

        snapshot = graph.snapshot()
        graph.remove_node("task")

        assert len(snapshot.nodes) == 5
        assert len(snapshot.edges) == 4
