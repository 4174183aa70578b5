"""
Workflow Designer CLI - Main entry point.

Provides commands for:
- Validating and laying out workflow documents
- Instantiating built-in templates
- Simulating workflows against the execution service
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..automations import AutomationCatalog, AutomationsClient
from ..editor import WorkflowEditor
from ..errors import CollaboratorError, SerializationError
from ..layout import LayoutDirection
from ..observability import setup_logging
from ..serialization import write_document
from ..simulation import ExecutionClient, SimulationStatus
from ..templates import list_templates


def _load(path: str, execution_client: Optional[ExecutionClient] = None) -> WorkflowEditor:
    """Open a workflow file in a fresh editor, exiting on a bad document."""
    editor = WorkflowEditor(execution_client=execution_client)
    try:
        editor.import_file(path)
    except SerializationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return editor


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool):
    """Workflow Designer - Build, check and simulate workflow graphs."""
    ctx.ensure_object(dict)

    if verbose:
        setup_logging("DEBUG")
    elif quiet:
        setup_logging("ERROR")
    else:
        setup_logging()

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# ==============================================================================
# Document Commands
# ==============================================================================

@cli.command("validate")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx: click.Context, workflow_file: str):
    """
    Validate a workflow document.

    Prints whole-graph errors and per-node findings. Exits 1 if the workflow
    is not valid.

    Examples:

        workflow-designer validate ./workflow-2024-05-01.json
    """
    editor = _load(workflow_file)

    for error in editor.workflow_errors:
        click.echo(f"  ✗ {error}")

    results = editor.validation_results
    for node in editor.nodes:
        result = results.get(node.id)
        if result is None:
            continue
        marker = "✗" if result.is_error else "!"
        title = node.data.title or node.kind.value
        click.echo(f"  {marker} [{node.kind.value}] {title} ({node.id}): {result.message}")

    if editor.is_valid:
        click.echo(f"✓ Workflow is valid ({len(editor.nodes)} nodes, {len(editor.edges)} edges)")
    else:
        click.echo("✗ Workflow is not valid")
        sys.exit(1)


@cli.command("layout")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--direction", "-d",
    type=click.Choice([d.value for d in LayoutDirection]),
    default=None,
    help="Layout direction (defaults to the configured direction)"
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    help="Write the laid-out document here instead of stdout"
)
@click.pass_context
def layout(ctx: click.Context, workflow_file: str, direction: Optional[str], output: Optional[str]):
    """
    Auto-layout a workflow document.

    Examples:

        workflow-designer layout ./workflow.json -d LR -o ./workflow.json
    """
    editor = _load(workflow_file)
    editor.auto_layout(direction=direction)
    document = editor.export_document()

    if output:
        path = write_document(output, document)
        if not ctx.obj.get("quiet"):
            click.echo(f"✓ Wrote {path}")
    else:
        click.echo(document.to_json())


# ==============================================================================
# Template Commands
# ==============================================================================

@cli.group()
def templates():
    """List and instantiate built-in templates."""
    pass


@templates.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def templates_list(as_json: bool):
    """List built-in templates."""
    catalog = list_templates()
    if as_json:
        click.echo(json.dumps(
            [{"id": t.id, "name": t.name, "description": t.description} for t in catalog],
            indent=2,
            ensure_ascii=False,
        ))
        return

    for template in catalog:
        click.echo(f"{template.id}: {template.name}")
        click.echo(f"  {template.description} ({len(template.nodes)} nodes)")


@templates.command("apply")
@click.argument("template_id")
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory to write the workflow document into"
)
@click.option(
    "--into", "-i",
    type=click.Path(exists=True, dir_okay=False),
    help="Existing workflow to add the template to"
)
@click.pass_context
def templates_apply(ctx: click.Context, template_id: str, output_dir: str, into: Optional[str]):
    """
    Instantiate a template and export it.

    TEMPLATE_ID: Id of a built-in template (see `templates list`)
    """
    editor = _load(into) if into else WorkflowEditor()
    try:
        node_ids = editor.apply_template(template_id)
    except KeyError:
        click.echo(f"Error: Unknown template: {template_id}", err=True)
        sys.exit(1)

    path = editor.export_to(Path(output_dir))
    if not ctx.obj.get("quiet"):
        click.echo(f"✓ Added {len(node_ids)} nodes from {template_id}")
        click.echo(f"✓ Wrote {path}")


# ==============================================================================
# Collaborator Commands
# ==============================================================================

@cli.command("simulate")
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--base-url", "-u", help="Execution service base URL")
@click.option("--json", "as_json", is_flag=True, help="Output logs as JSON")
@click.pass_context
def simulate(ctx: click.Context, workflow_file: str, base_url: Optional[str], as_json: bool):
    """
    Simulate a workflow on the execution service.

    Exits 1 unless the simulation completed.
    """
    editor = _load(workflow_file, execution_client=ExecutionClient(base_url=base_url))
    outcome = asyncio.run(editor.simulate())

    if outcome.status == SimulationStatus.INVALID:
        click.echo("✗ Cannot simulate:", err=True)
        for error in outcome.errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            {
                "status": outcome.status.value,
                "simulationId": outcome.simulation_id,
                "logs": [entry.to_dict() for entry in outcome.logs],
            },
            indent=2,
        ))
    else:
        for entry in outcome.logs:
            marker = "✓" if entry.is_success else "✗"
            click.echo(f"  {marker} {entry.message}")

    if not outcome.is_success:
        sys.exit(1)


@cli.command("automations")
@click.option("--base-url", "-u", help="Automations service base URL")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def automations(base_url: Optional[str], as_json: bool):
    """List the actions available to automated nodes."""
    catalog = AutomationCatalog(AutomationsClient(base_url=base_url))
    try:
        actions = asyncio.run(catalog.get())
    except CollaboratorError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([action.model_dump() for action in actions], indent=2))
        return

    for action in actions:
        params = ", ".join(action.params) or "no params"
        click.echo(f"{action.id}: {action.label} ({params})")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
