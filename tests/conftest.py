"""Pytest configuration and fixtures."""
import logging
import os

import pytest

# Set test environment variables
os.environ["WORKFLOW_DESIGNER_ENV"] = "test"
os.environ["WORKFLOW_DESIGNER_EXECUTION_BASE_URL"] = "http://execution.test"
os.environ["WORKFLOW_DESIGNER_LOG_FORMAT"] = "text"

from workflow_designer.config import reset_settings  # noqa: E402
from workflow_designer.graph import WorkflowEdge, WorkflowNode  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so monkeypatched env vars apply."""
    reset_settings()
    yield
    reset_settings()
    # CliRunner swaps stderr; drop handlers bound to its closed streams
    logging.getLogger().handlers.clear()


def _make_node(node_id, kind, x=0, y=0, **data):
    return WorkflowNode.model_validate({
        "id": node_id,
        "type": kind,
        "position": {"x": x, "y": y},
        "data": data,
    })


def _make_edge(source, target, edge_id=None):
    return WorkflowEdge(id=edge_id or f"e-{source}-{target}", source=source, target=target)


@pytest.fixture
def make_node():
    """Build a node from wire-style keyword data."""
    return _make_node


@pytest.fixture
def make_edge():
    """Build an edge with a readable default id."""
    return _make_edge


@pytest.fixture
def linear_workflow():
    """Valid start -> task -> approval -> automated -> end graph."""
    nodes = [
        _make_node("start", "start", title="Start"),
        _make_node("task", "task", title="Collect documents", assignee="Alice"),
        _make_node("approval", "approval", title="Review", approverRole="Manager"),
        _make_node("auto", "automated", title="Notify", actionId="send-email",
                   actionParams={"to": "hr@example.com"}),
        _make_node("end", "end", title="End", endMessage="Done"),
    ]
    edges = [
        _make_edge("start", "task"),
        _make_edge("task", "approval"),
        _make_edge("approval", "auto"),
        _make_edge("auto", "end"),
    ]
    return nodes, edges


@pytest.fixture
def workflow_document(linear_workflow):
    """Wire-format document for ``linear_workflow``."""
    nodes, edges = linear_workflow
    return {
        "nodes": [node.to_dict() for node in nodes],
        "edges": [edge.to_dict() for edge in edges],
        "version": "1.0",
        "exportedAt": "2024-05-01T12:00:00.000Z",
    }
