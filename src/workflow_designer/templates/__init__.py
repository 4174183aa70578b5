"""
Workflow templates.

This package provides:
- WorkflowTemplate: immutable graph skeleton with index-based edges
- instantiate_template: expand a template into fresh nodes and edges
- list_templates / get_template: the built-in catalog
"""

from .models import TemplateEdge, TemplateNode, WorkflowTemplate
from .instantiate import InstantiatedTemplate, instantiate_template
from .catalog import WORKFLOW_TEMPLATES, get_template, list_templates

__all__ = [
    # Models
    "TemplateEdge",
    "TemplateNode",
    "WorkflowTemplate",
    # Instantiation
    "InstantiatedTemplate",
    "instantiate_template",
    # Catalog
    "WORKFLOW_TEMPLATES",
    "get_template",
    "list_templates",
]
