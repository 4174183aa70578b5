"""Built-in workflow templates."""

from __future__ import annotations

from typing import Dict, List

from .models import WorkflowTemplate


def _chain(length: int) -> List[Dict[str, int]]:
    return [{"sourceIndex": i, "targetIndex": i + 1} for i in range(length - 1)]


BASIC_APPROVAL = WorkflowTemplate.model_validate({
    "id": "basic-approval",
    "name": "Basic Approval Flow",
    "description": "Start → Approval → End",
    "nodes": [
        {"type": "start", "position": {"x": 250, "y": 50}, "data": {"title": "Start"}},
        {
            "type": "approval",
            "position": {"x": 220, "y": 180},
            "data": {"title": "Manager Approval", "approverRole": "Manager", "autoApproveThreshold": 0},
        },
        {
            "type": "end",
            "position": {"x": 250, "y": 320},
            "data": {"title": "Complete", "endMessage": "Workflow completed"},
        },
    ],
    "edges": _chain(3),
})

TASK_APPROVAL_PAIR = WorkflowTemplate.model_validate({
    "id": "task-approval-pair",
    "name": "Task + Approval Pair",
    "description": "Start → Task → Approval → End",
    "nodes": [
        {"type": "start", "position": {"x": 250, "y": 50}, "data": {"title": "Start"}},
        {
            "type": "task",
            "position": {"x": 200, "y": 160},
            "data": {
                "title": "Complete Form",
                "description": "Fill out the required form",
                "assignee": "",
                "dueDate": "",
            },
        },
        {
            "type": "approval",
            "position": {"x": 210, "y": 320},
            "data": {"title": "Review", "approverRole": "Supervisor", "autoApproveThreshold": 0},
        },
        {
            "type": "end",
            "position": {"x": 250, "y": 470},
            "data": {"title": "Done", "endMessage": "Process complete"},
        },
    ],
    "edges": _chain(4),
})

ONBOARDING = WorkflowTemplate.model_validate({
    "id": "onboarding",
    "name": "Employee Onboarding",
    "description": "Complete HR onboarding flow",
    "nodes": [
        {"type": "start", "position": {"x": 250, "y": 30}, "data": {"title": "New Hire"}},
        {
            "type": "task",
            "position": {"x": 180, "y": 130},
            "data": {
                "title": "Submit Documents",
                "description": "Upload ID and tax forms",
                "assignee": "New Employee",
                "dueDate": "",
            },
        },
        {
            "type": "automated",
            "position": {"x": 190, "y": 280},
            "data": {"title": "Create Accounts", "actionId": "create-accounts", "actionParams": {}},
        },
        {
            "type": "approval",
            "position": {"x": 200, "y": 420},
            "data": {"title": "HR Verification", "approverRole": "HR Manager", "autoApproveThreshold": 0},
        },
        {
            "type": "task",
            "position": {"x": 180, "y": 560},
            "data": {
                "title": "Equipment Setup",
                "description": "Assign laptop and badge",
                "assignee": "IT Support",
                "dueDate": "",
            },
        },
        {
            "type": "end",
            "position": {"x": 250, "y": 700},
            "data": {"title": "Onboarded", "endMessage": "Welcome to the team!"},
        },
    ],
    "edges": _chain(6),
})

LEAVE_REQUEST = WorkflowTemplate.model_validate({
    "id": "leave-request",
    "name": "Leave Request",
    "description": "Request → Approval → Notification",
    "nodes": [
        {"type": "start", "position": {"x": 250, "y": 50}, "data": {"title": "Leave Request"}},
        {
            "type": "task",
            "position": {"x": 180, "y": 150},
            "data": {
                "title": "Submit Request",
                "description": "Enter leave dates and reason",
                "assignee": "Employee",
                "dueDate": "",
            },
        },
        {
            "type": "approval",
            "position": {"x": 200, "y": 300},
            "data": {"title": "Manager Approval", "approverRole": "Direct Manager", "autoApproveThreshold": 0},
        },
        {
            "type": "automated",
            "position": {"x": 190, "y": 450},
            "data": {
                "title": "Send Notification",
                "actionId": "send-email",
                "actionParams": {"template": "leave-approved"},
            },
        },
        {
            "type": "end",
            "position": {"x": 250, "y": 580},
            "data": {"title": "Approved", "endMessage": "Leave request approved"},
        },
    ],
    "edges": _chain(5),
})

WORKFLOW_TEMPLATES: List[WorkflowTemplate] = [
    BASIC_APPROVAL,
    TASK_APPROVAL_PAIR,
    ONBOARDING,
    LEAVE_REQUEST,
]


def list_templates() -> List[WorkflowTemplate]:
    """All built-in templates, in catalog order."""
    return list(WORKFLOW_TEMPLATES)


def get_template(template_id: str) -> WorkflowTemplate:
    """
    Look up a template by id.

    Raises:
        KeyError: If no template has that id
    """
    for template in WORKFLOW_TEMPLATES:
        if template.id == template_id:
            return template
    raise KeyError(f"Unknown template: {template_id}")


__all__ = [
    "BASIC_APPROVAL",
    "LEAVE_REQUEST",
    "ONBOARDING",
    "TASK_APPROVAL_PAIR",
    "WORKFLOW_TEMPLATES",
    "get_template",
    "list_templates",
]
