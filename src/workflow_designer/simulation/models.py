"""Simulation request/response and log models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SimulationStep(BaseModel):
    """One step reported by the execution service."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    node_id: str = Field(..., alias="nodeId")
    type: Optional[str] = None
    message: Optional[str] = None
    status: str = "success"
    details: Optional[Dict[str, Any]] = None
    # Epoch milliseconds
    timestamp: Optional[float] = None

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return v
        if not math.isfinite(v):
            raise ValueError("timestamp must be a finite number")
        try:
            timestamp_from_millis(v)
        except (OverflowError, ValueError, OSError) as e:
            raise ValueError(f"timestamp out of range: {v}") from e
        return v


class SimulateResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    steps: List[SimulationStep] = Field(default_factory=list)


class SimulationStatus(str, Enum):
    """Overall outcome of one simulation request."""
    COMPLETED = "completed"
    INVALID = "invalid"      # pre-flight validation failed, nothing sent
    REJECTED = "rejected"    # another simulation was already running
    FAILED = "failed"        # the execution service failed


@dataclass(frozen=True)
class LogEntry:
    """Display line for one executed node."""
    node_id: str
    status: str
    message: str
    kind: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "type": self.kind,
            "status": self.status,
            "message": self.message,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class SimulationOutcome:
    """Result of ``SimulationAdapter.run``."""
    status: SimulationStatus
    errors: List[str] = field(default_factory=list)
    logs: List[LogEntry] = field(default_factory=list)
    simulation_id: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == SimulationStatus.COMPLETED


def timestamp_from_millis(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


__all__ = [
    "LogEntry",
    "SimulateResponse",
    "SimulationOutcome",
    "SimulationStatus",
    "SimulationStep",
    "timestamp_from_millis",
]
