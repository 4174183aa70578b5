"""Observability package."""
from workflow_designer.observability.logging import (
    get_logger,
    setup_logging,
    with_log_context,
)

__all__ = ["get_logger", "setup_logging", "with_log_context"]
