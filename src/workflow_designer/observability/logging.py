"""Structured JSON logging with workflow context."""
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from workflow_designer.config import get_settings

CONTEXT_FIELDS = ("simulation_id", "node_id", "template_id")


class WorkflowContextFilter(logging.Filter):
    """Add workflow context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add default context fields if not present."""
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Drop empty context so plain records stay small
        for name in CONTEXT_FIELDS:
            if not log_record.get(name):
                log_record.pop(name, None)


def setup_logging(level: str | None = None) -> None:
    """Configure application logging (JSON by default)."""
    settings = get_settings()

    handler = logging.StreamHandler(sys.stderr)
    if settings.log_format == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    handler.setFormatter(formatter)
    handler.addFilter(WorkflowContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level or settings.log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges per-call extra with the adapter's extra."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, **context: Any) -> logging.LoggerAdapter:
    """
    Get a logger with workflow context support.

    Args:
        name: Logger name (typically __name__)
        **context: Context fields bound to every record

    Returns:
        LoggerAdapter that can accept context in extra dict
    """
    logger = logging.getLogger(name)
    return ContextLoggerAdapter(logger, extra=with_log_context(**context))


def with_log_context(
    simulation_id: str | None = None,
    node_id: str | None = None,
    template_id: str | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create an extra dict with workflow context for logging.

    Args:
        simulation_id: Simulation run ID
        node_id: Node the record is about
        template_id: Template being applied
        **kwargs: Additional context fields

    Returns:
        Dict to pass as extra parameter to logger methods
    """
    extra = kwargs.copy()
    if simulation_id:
        extra["simulation_id"] = simulation_id
    if node_id:
        extra["node_id"] = node_id
    if template_id:
        extra["template_id"] = template_id
    return extra
