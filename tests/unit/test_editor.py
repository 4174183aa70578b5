"""Tests for the WorkflowEditor composition root."""
import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest
from pydantic import ValidationError

from workflow_designer import WorkflowEditor
from workflow_designer.errors import GraphIntegrityError, SerializationError
from workflow_designer.graph import NodeKind, Position
from workflow_designer.history import HistoryManager
from workflow_designer.simulation import ExecutionClient, SimulationStatus


@pytest.fixture
def editor():
    return WorkflowEditor()


def _chain(editor, *kinds):
    ids = [editor.add_node(kind) for kind in kinds]
    for source, target in zip(ids, ids[1:]):
        editor.connect(source, target)
    return ids


class TestEditing:
    """Test mutations and their history entries."""

    def test_add_node_is_undoable(self, editor):
        editor.add_node("start")

        assert len(editor.nodes) == 1
        assert editor.undo() is True
        assert editor.nodes == ()
        assert editor.redo() is True
        assert editor.nodes[0].kind == NodeKind.START

    def test_undo_with_empty_history(self, editor):
        assert editor.undo() is False
        assert editor.redo() is False

    def test_every_mutation_takes_one_snapshot(self, editor):
        start, end = _chain(editor, "start", "end")
        editor.move_node(start, {"x": 10, "y": 10})
        editor.update_node_data(end, {"endMessage": "Bye"})

        # add, add, connect, move, update
        assert editor.history.history_length == 5

    def test_undo_every_step_restores_empty_canvas(self, editor):
        start = editor.add_node("start")
        end = editor.add_node("end")
        editor.connect(start, end)
        editor.update_node_data(end, {"endMessage": "Bye"})
        editor.remove_node(start)

        for _ in range(5):
            assert editor.undo() is True

        assert editor.nodes == ()
        assert editor.edges == ()
        assert editor.undo() is False

    def test_undo_restores_removed_node_and_edges(self, editor):
        start, task, end = _chain(editor, "start", "task", "end")

        editor.remove_node(task)
        assert len(editor.edges) == 0

        editor.undo()
        assert [n.id for n in editor.nodes] == [start, task, end]
        assert len(editor.edges) == 2

    def test_new_edit_clears_redo(self, editor):
        editor.add_node("start")
        editor.undo()

        editor.add_node("end")

        assert editor.history.can_redo is False

    def test_noop_mutations_leave_history_alone(self, editor):
        editor.remove_node("missing")
        editor.move_node("missing", {"x": 1, "y": 1})
        editor.update_node_data("missing", {"title": "x"})
        editor.remove_edge("missing")

        assert editor.history.history_length == 0

    def test_failed_connect_leaves_state_untouched(self, editor):
        start = editor.add_node("start")

        with pytest.raises(GraphIntegrityError):
            editor.connect(start, "ghost")

        assert editor.edges == ()
        assert editor.history.history_length == 1

    def test_invalid_data_patch_leaves_state_untouched(self, editor):
        node_id = editor.add_node("approval")

        with pytest.raises(ValidationError):
            editor.update_node_data(node_id, {"autoApproveThreshold": "lots"})

        assert editor.history.history_length == 1
        assert editor.nodes[0].data.auto_approve_threshold == 0

    def test_history_bound_from_settings(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_DESIGNER_HISTORY_MAX", "2")
        editor = WorkflowEditor()

        for _ in range(4):
            editor.add_node("task")

        assert editor.history.history_length == 2

    def test_custom_history(self):
        history = HistoryManager(max_history=1)
        editor = WorkflowEditor(history=history)

        editor.add_node("start")
        editor.add_node("end")

        assert editor.history is history
        assert history.history_length == 1


class TestDerivedState:
    """Test validation exposed by the editor."""

    def test_empty_editor_is_invalid(self, editor):
        assert editor.is_valid is False
        assert editor.workflow_errors == [
            "Workflow is missing a Start node.",
            "Workflow is missing an End node.",
        ]

    def test_connected_workflow_is_valid(self, editor):
        start, approval, end = _chain(editor, "start", "approval", "end")

        assert editor.validation_results == {}
        assert editor.is_valid is True

    def test_disconnected_node_reported(self, editor):
        _chain(editor, "start", "end")
        task = editor.add_node("task")

        assert editor.validation_results[task].message == "Node is disconnected from the workflow."


class TestLayoutAndTemplates:
    """Test auto-layout and template insertion."""

    def test_auto_layout_is_undoable(self, editor):
        start, end = _chain(editor, "start", "end")

        assert editor.auto_layout() is True
        laid_out = {n.id: n.position for n in editor.nodes}
        assert laid_out[start] == Position(x=0, y=0)
        assert laid_out[end] == Position(x=0, y=160)

        editor.undo()
        assert all(n.position == Position(x=50, y=50) for n in editor.nodes)

    def test_auto_layout_direction(self, editor):
        start, end = _chain(editor, "start", "end")

        editor.auto_layout(direction="LR")

        assert editor.graph.get_node(end).position == Position(x=280, y=0)

    def test_auto_layout_empty(self, editor):
        assert editor.auto_layout() is False
        assert editor.history.history_length == 0

    def test_apply_template_on_empty_canvas(self, editor):
        node_ids = editor.apply_template("basic-approval")

        assert len(node_ids) == 3
        assert len(editor.edges) == 2
        assert editor.graph.get_node(node_ids[0]).position == Position(x=250, y=50)
        assert editor.is_valid

    def test_apply_template_offsets_on_busy_canvas(self, editor):
        editor.add_node("task")

        node_ids = editor.apply_template("basic-approval")

        assert editor.graph.get_node(node_ids[0]).position == Position(x=650, y=50)

    def test_apply_template_twice_gives_distinct_ids(self, editor):
        first = editor.apply_template("leave-request")
        second = editor.apply_template("leave-request")

        assert set(first).isdisjoint(second)
        assert len(editor.nodes) == 10

    def test_apply_template_is_one_undo_step(self, editor):
        editor.apply_template("onboarding")

        editor.undo()

        assert editor.nodes == ()
        assert editor.edges == ()

    def test_unknown_template(self, editor):
        with pytest.raises(KeyError):
            editor.apply_template("missing")

        assert editor.history.history_length == 0


class TestImportExport:
    """Test document round trips through the editor."""

    NOW = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def test_export_to_directory(self, editor, tmp_path):
        editor.apply_template("basic-approval")

        path = editor.export_to(tmp_path, now=self.NOW)

        assert path == tmp_path / "workflow-2024-05-01.json"
        data = json.loads(path.read_text())
        assert len(data["nodes"]) == 3
        assert data["exportedAt"] == "2024-05-01T09:00:00.000Z"

    def test_export_prefix_from_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WORKFLOW_DESIGNER_EXPORT_PREFIX", "flow")
        editor = WorkflowEditor()

        path = editor.export_to(tmp_path, now=self.NOW)

        assert path.name == "flow-2024-05-01.json"

    def test_import_replaces_graph(self, editor, workflow_document):
        editor.add_node("task")

        editor.import_document(json.dumps(workflow_document))

        assert [n.id for n in editor.nodes] == ["start", "task", "approval", "auto", "end"]
        assert editor.is_valid

        editor.undo()
        assert len(editor.nodes) == 1

    def test_failed_import_leaves_state_untouched(self, editor):
        node_id = editor.add_node("task")

        with pytest.raises(SerializationError):
            editor.import_document('{"nodes": []}')

        assert [n.id for n in editor.nodes] == [node_id]
        assert editor.history.history_length == 1

    def test_import_file(self, editor, tmp_path, workflow_document):
        path = tmp_path / "in.json"
        path.write_text(json.dumps(workflow_document))

        editor.import_file(path)

        assert len(editor.edges) == 4


class TestSimulate:
    """Test simulation through the editor."""

    def test_simulate(self, linear_workflow, workflow_document):
        def handler(request):
            body = json.loads(request.content)
            steps = [{"nodeId": n["id"], "type": n["type"], "details": n["data"]} for n in body["nodes"]]
            return httpx.Response(200, json={"steps": steps})

        client = ExecutionClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        editor = WorkflowEditor(execution_client=client)
        editor.import_document(json.dumps(workflow_document))

        outcome = asyncio.run(editor.simulate())

        assert outcome.status == SimulationStatus.COMPLETED
        assert len(outcome.logs) == 5

    def test_simulate_invalid(self, editor):
        editor.add_node("task")

        outcome = asyncio.run(editor.simulate())

        assert outcome.status == SimulationStatus.INVALID
        assert outcome.errors == ["Missing Start node", "Missing End node"]
