"""Turn execution steps into human-readable log entries."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..graph.models import NodeKind
from .models import LogEntry, SimulationStep, timestamp_from_millis


def _text(details: Mapping[str, Any], key: str, default: str) -> str:
    value = details.get(key)
    if value is None or value == "":
        return default
    return str(value)


def _format_start(details: Mapping[str, Any]) -> str:
    return f'Started workflow "{_text(details, "title", "Start")}"'


def _format_task(details: Mapping[str, Any]) -> str:
    title = _text(details, "title", "Task")
    extra = f"assignee: {_text(details, 'assignee', 'Unassigned')}"
    if details.get("dueDate"):
        extra += f", due {details['dueDate']}"
    return f'Completed task "{title}" ({extra})'


def _format_approval(details: Mapping[str, Any]) -> str:
    decision = _text(details, "decision", "approved").capitalize()
    title = _text(details, "title", "Approval")
    return f'{decision} "{title}" by {_text(details, "approverRole", "Approver")}'


def _format_automated(details: Mapping[str, Any]) -> str:
    label = details.get("actionLabel") or details.get("actionId") or "Automated action"
    message = f'Ran action "{label}"'
    params = details.get("actionParams")
    if isinstance(params, Mapping) and params:
        message += " with " + ", ".join(f"{k}={v}" for k, v in params.items())
    return message


def _format_end(details: Mapping[str, Any]) -> str:
    message = f"Finished workflow: {_text(details, 'endMessage', 'End')}"
    if details.get("summary"):
        message += " (summary requested)"
    return message


FORMATTERS: Dict[NodeKind, Callable[[Mapping[str, Any]], str]] = {
    NodeKind.START: _format_start,
    NodeKind.TASK: _format_task,
    NodeKind.APPROVAL: _format_approval,
    NodeKind.AUTOMATED: _format_automated,
    NodeKind.END: _format_end,
}


def _resolve_kind(step: SimulationStep, node_kinds: Mapping[str, str]) -> Optional[NodeKind]:
    raw = step.type or (node_kinds or {}).get(step.node_id)
    try:
        return NodeKind(raw)
    except ValueError:
        return None


def describe_step(step: SimulationStep, node_kinds: Optional[Mapping[str, str]] = None) -> str:
    """
    Message for a step.

    Structured ``details`` win, then the service's own ``message``, then a
    generic line naming the node.
    """
    kind = _resolve_kind(step, node_kinds)
    if step.details and kind is not None:
        return FORMATTERS[kind](step.details)
    if step.message:
        return step.message
    return f"Executed node {step.node_id}"


def format_step(step: SimulationStep, node_kinds: Optional[Mapping[str, str]] = None) -> LogEntry:
    kind = _resolve_kind(step, node_kinds)
    return LogEntry(
        node_id=step.node_id,
        status=step.status,
        message=describe_step(step, node_kinds),
        kind=kind.value if kind is not None else step.type,
        timestamp=timestamp_from_millis(step.timestamp),
    )


def format_steps(
    steps: Iterable[SimulationStep],
    node_kinds: Optional[Mapping[str, str]] = None,
) -> List[LogEntry]:
    """Format steps in the order the service reported them."""
    return [format_step(step, node_kinds or {}) for step in steps]


__all__ = [
    "describe_step",
    "format_step",
    "format_steps",
]
