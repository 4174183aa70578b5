"""
Simulation adapter.

Runs the pre-flight checks, dispatches the graph to the execution service
and turns the returned steps into log entries. At most one simulation is in
flight per adapter; collaborator failures come back as a single "failed"
log entry instead of an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..config import get_settings
from ..errors import CollaboratorError
from ..graph.models import WorkflowEdge, WorkflowNode, new_id
from ..observability import get_logger
from ..validation import get_simulation_errors
from .client import ExecutionClient
from .formatting import format_steps
from .models import LogEntry, SimulationOutcome, SimulationStatus


logger = logging.getLogger(__name__)

ALREADY_RUNNING = "A simulation is already running."


def build_payload(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
) -> Dict[str, Any]:
    """Minimal request body: ``{id, type, data}`` nodes and ``{id, source, target}`` edges."""
    return {
        "nodes": [
            {
                "id": node.id,
                "type": node.kind.value,
                "data": node.data.model_dump(mode="json", by_alias=True, exclude_none=True),
            }
            for node in nodes
        ],
        "edges": [
            {"id": edge.id, "source": edge.source, "target": edge.target}
            for edge in edges
        ],
    }


class SimulationAdapter:
    """
    Go/no-go check plus dispatch to the execution service.

    Usage:
        adapter = SimulationAdapter(ExecutionClient(base_url="http://svc"))
        outcome = await adapter.run(graph.nodes, graph.edges)
        for entry in outcome.logs:
            print(entry.node_id, entry.status, entry.message)
    """

    def __init__(
        self,
        client: Optional[ExecutionClient] = None,
        max_nodes: Optional[int] = None,
    ):
        self._client = client or ExecutionClient()
        self._max_nodes = max_nodes or get_settings().max_graph_nodes
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(
        self,
        nodes: Sequence[WorkflowNode],
        edges: Sequence[WorkflowEdge],
    ) -> SimulationOutcome:
        """
        Validate and simulate a workflow.

        Returns:
            SimulationOutcome; ``status`` tells whether the request was
            rejected, invalid, failed or completed
        """
        if self._running:
            logger.warning("Simulation requested while another one is running")
            return SimulationOutcome(status=SimulationStatus.REJECTED, errors=[ALREADY_RUNNING])

        errors = get_simulation_errors(nodes, edges, max_nodes=self._max_nodes)
        if errors:
            logger.info(f"Simulation blocked by validation: {errors}")
            return SimulationOutcome(status=SimulationStatus.INVALID, errors=errors)

        simulation_id = new_id()
        log = get_logger(__name__, simulation_id=simulation_id)
        payload = build_payload(nodes, edges)
        node_kinds = {node.id: node.kind.value for node in nodes}

        self._running = True
        log.info(f"Simulation started: {len(nodes)} nodes, {len(edges)} edges")
        try:
            response = await self._client.simulate(payload)
        except CollaboratorError as e:
            log.warning(f"Simulation failed: {e}")
            return SimulationOutcome(
                status=SimulationStatus.FAILED,
                logs=[LogEntry(node_id="error", status="failed", message=str(e))],
                simulation_id=simulation_id,
            )
        finally:
            self._running = False

        logs = format_steps(response.steps, node_kinds)
        log.info(f"Simulation completed with {len(logs)} step(s)")
        return SimulationOutcome(
            status=SimulationStatus.COMPLETED,
            logs=logs,
            simulation_id=simulation_id,
        )


__all__ = [
    "ALREADY_RUNNING",
    "SimulationAdapter",
    "build_payload",
]
