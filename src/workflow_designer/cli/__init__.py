"""
Workflow Designer CLI - Command-line interface for workflow documents.

Commands:
- validate: Check a workflow document
- layout: Auto-layout a workflow document
- templates: List and instantiate built-in templates
- simulate: Run a workflow against the execution service
- automations: Show the automations catalog
"""

from .main import cli, main

__all__ = ["cli", "main"]
