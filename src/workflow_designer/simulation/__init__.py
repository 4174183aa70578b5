"""
Workflow simulation.

This package provides:
- ExecutionClient: async client for the remote execution service
- SimulationAdapter: pre-flight validation, dispatch and log formatting
- LogEntry / SimulationOutcome: what callers display
"""

from .models import (
    LogEntry,
    SimulateResponse,
    SimulationOutcome,
    SimulationStatus,
    SimulationStep,
)
from .client import ExecutionClient
from .formatting import describe_step, format_step, format_steps
from .adapter import SimulationAdapter, build_payload

__all__ = [
    # Models
    "LogEntry",
    "SimulateResponse",
    "SimulationOutcome",
    "SimulationStatus",
    "SimulationStep",
    # Client
    "ExecutionClient",
    # Formatting
    "describe_step",
    "format_step",
    "format_steps",
    # Adapter
    "SimulationAdapter",
    "build_payload",
]
