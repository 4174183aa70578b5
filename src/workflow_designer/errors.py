"""Exception taxonomy for the workflow designer."""

from typing import Optional


class WorkflowDesignerError(Exception):
    """Base exception for workflow designer errors."""

    pass


class GraphIntegrityError(WorkflowDesignerError):
    """Raised when an operation would leave a dangling or duplicate edge."""

    pass


class GraphTooLargeError(WorkflowDesignerError):
    """Raised when a graph exceeds the configured node-count ceiling."""

    pass


class SerializationError(WorkflowDesignerError):
    """Raised when an imported workflow document is malformed or incomplete."""

    pass


class CollaboratorError(WorkflowDesignerError):
    """Raised when the execution or automations service fails or misbehaves."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class TemplateInstantiationError(WorkflowDesignerError):
    """Raised when a template references nodes it does not define."""

    pass
