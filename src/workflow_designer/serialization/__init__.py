"""Workflow document export and import."""
from .document import (
    DOCUMENT_VERSION,
    WorkflowDocument,
    document_filename,
    export_workflow,
    import_workflow,
    parse_workflow_document,
    read_document,
    validate_workflow_data,
    write_document,
)

__all__ = [
    "DOCUMENT_VERSION",
    "WorkflowDocument",
    "document_filename",
    "export_workflow",
    "import_workflow",
    "parse_workflow_document",
    "read_document",
    "validate_workflow_data",
    "write_document",
]
