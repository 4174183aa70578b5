"""Tests for the validation engine."""
import pytest

from workflow_designer.validation import (
    Severity,
    get_simulation_errors,
    get_workflow_errors,
    is_workflow_valid,
    validate_workflow,
)


class TestValidateWorkflow:
    """Test per-node rules."""

    def test_valid_workflow_has_no_findings(self, linear_workflow):
        nodes, edges = linear_workflow

        assert validate_workflow(nodes, edges) == {}
        assert is_workflow_valid(nodes, edges) is True

    def test_start_with_incoming_edge(self, linear_workflow, make_edge):
        nodes, edges = linear_workflow

        results = validate_workflow(nodes, edges + [make_edge("task", "start")])

        assert results["start"].message == "Start node should not have incoming connections."
        assert results["start"].severity == Severity.ERROR

    def test_start_without_outgoing_edge(self, make_node):
        results = validate_workflow([make_node("s", "start")], [])

        assert results["s"].message == "Start node must have at least one outgoing connection."

    def test_multiple_starts(self, make_node, make_edge):
        nodes = [make_node("s1", "start"), make_node("s2", "start"), make_node("e", "end")]
        edges = [make_edge("s1", "e"), make_edge("s2", "e")]

        results = validate_workflow(nodes, edges)

        for node_id in ("s1", "s2"):
            assert results[node_id].message == (
                "Multiple start nodes detected. Only one start node is allowed."
            )

    def test_multiple_ends_is_warning(self, make_node, make_edge):
        nodes = [make_node("s", "start"), make_node("e1", "end"), make_node("e2", "end")]
        edges = [make_edge("s", "e1"), make_edge("s", "e2")]

        results = validate_workflow(nodes, edges)

        assert results["e1"].severity == Severity.WARNING
        assert results["e1"].valid is False
        assert is_workflow_valid(nodes, edges) is False

    def test_end_with_outgoing_edge(self, linear_workflow, make_edge):
        nodes, edges = linear_workflow

        results = validate_workflow(nodes, edges + [make_edge("end", "task")])

        assert results["end"].message == "End node should not have outgoing connections."

    def test_end_without_incoming_edge(self, make_node):
        results = validate_workflow([make_node("e", "end")], [])

        assert results["e"].message == "End node must have at least one incoming connection."

    @pytest.mark.parametrize("title", ["", "   ", "New Task"])
    def test_task_needs_meaningful_title(self, linear_workflow, make_node, title):
        nodes, edges = linear_workflow
        nodes[1] = make_node("task", "task", title=title)

        result = validate_workflow(nodes, edges)["task"]

        assert result.message == "Task requires a meaningful title."
        assert result.severity == Severity.WARNING

    def test_task_missing_outgoing(self, make_node, make_edge):
        nodes = [make_node("s", "start"), make_node("t", "task", title="Work")]

        result = validate_workflow(nodes, [make_edge("s", "t")])["t"]

        assert result.message == "Task node has no outgoing connection."
        assert result.severity == Severity.WARNING

    def test_task_missing_incoming(self, make_node, make_edge):
        nodes = [make_node("t", "task", title="Work"), make_node("e", "end")]

        result = validate_workflow(nodes, [make_edge("t", "e")])["t"]

        assert result.message == "Task node has no incoming connection."

    def test_disconnected_titled_task(self, make_node):
        result = validate_workflow([make_node("t", "task", title="Work")], [])["t"]

        assert result.message == "Task node is disconnected. Connect it to the workflow."
        assert result.is_error

    def test_disconnected_guard_overrides_warning(self, make_node):
        # The title warning would win first; disconnection is still an error
        result = validate_workflow([make_node("t", "task", title="New Task")], [])["t"]

        assert result.message == "Node is disconnected from the workflow."
        assert result.is_error

    def test_approval_requires_role(self, linear_workflow, make_node):
        nodes, edges = linear_workflow
        nodes[2] = make_node("approval", "approval", title="Review", approverRole=" ")

        result = validate_workflow(nodes, edges)["approval"]

        assert result.message == "Approval node requires an approver role."
        assert result.severity == Severity.WARNING

    def test_approval_without_incoming_is_error(self, make_node, make_edge):
        nodes = [make_node("a", "approval", approverRole="Manager"), make_node("e", "end")]

        result = validate_workflow(nodes, [make_edge("a", "e")])["a"]

        assert result.message == "Approval node has no incoming connection."
        assert result.is_error

    def test_approval_without_outgoing_is_warning(self, make_node, make_edge):
        nodes = [make_node("s", "start"), make_node("a", "approval", approverRole="Manager")]

        result = validate_workflow(nodes, [make_edge("s", "a")])["a"]

        assert result.message == "Approval node has no outgoing connection."
        assert result.severity == Severity.WARNING

    def test_automated_requires_action(self, linear_workflow, make_node):
        nodes, edges = linear_workflow
        nodes[3] = make_node("auto", "automated", title="Notify", actionId="")

        result = validate_workflow(nodes, edges)["auto"]

        assert result.message == "Automated node requires an action to be selected."

    def test_automated_half_connected(self, make_node, make_edge):
        nodes = [make_node("s", "start"), make_node("x", "automated", actionId="send-email")]

        result = validate_workflow(nodes, [make_edge("s", "x")])["x"]

        assert result.message == "Automated node must be connected to the workflow."
        assert result.is_error


class TestWorkflowErrors:
    """Test whole-graph checks."""

    def test_empty_graph(self):
        assert get_workflow_errors([]) == [
            "Workflow is missing a Start node.",
            "Workflow is missing an End node.",
        ]

    def test_multiple_starts(self, make_node):
        nodes = [make_node("s1", "start"), make_node("s2", "start"), make_node("e", "end")]

        assert get_workflow_errors(nodes) == [
            "Workflow has multiple Start nodes. Only one is allowed.",
        ]

    def test_empty_graph_is_not_valid(self):
        assert is_workflow_valid([], []) is False


class TestSimulationErrors:
    """Test pre-flight checks."""

    def test_valid_workflow(self, linear_workflow):
        assert get_simulation_errors(*linear_workflow) == []

    def test_missing_start_and_end(self, make_node):
        errors = get_simulation_errors([make_node("t", "task")], [])

        assert errors == ["Missing Start node", "Missing End node"]

    def test_more_than_one_start(self, linear_workflow, make_node):
        nodes, edges = linear_workflow

        errors = get_simulation_errors(nodes + [make_node("s2", "start")], edges)

        assert errors == ["More than one Start node found"]

    def test_cycle(self, linear_workflow, make_edge):
        nodes, edges = linear_workflow

        errors = get_simulation_errors(nodes, edges + [make_edge("auto", "task")])

        assert errors == ["Cycle detected in workflow"]

    def test_graph_too_large(self, linear_workflow):
        errors = get_simulation_errors(*linear_workflow, max_nodes=3)

        assert len(errors) == 1
        assert "exceeding the limit of 3" in errors[0]
