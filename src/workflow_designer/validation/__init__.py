"""Workflow validation rules."""
from .engine import (
    Severity,
    ValidationResult,
    ValidationResults,
    get_simulation_errors,
    get_workflow_errors,
    is_workflow_valid,
    validate_workflow,
)

__all__ = [
    "Severity",
    "ValidationResult",
    "ValidationResults",
    "get_simulation_errors",
    "get_workflow_errors",
    "is_workflow_valid",
    "validate_workflow",
]
