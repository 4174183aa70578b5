"""Automation action models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class AutomationAction(BaseModel):
    """An action an automated node can run."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    params: List[str] = Field(default_factory=list)


__all__ = ["AutomationAction"]
