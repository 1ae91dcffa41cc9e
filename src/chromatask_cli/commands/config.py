"""Configuration and context management commands."""

import typer
from pydantic import ValidationError as PydanticValidationError

from chromatask_cli.models.config_models import Context
from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.services.config_service import get_config_service
from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management")

CONTEXT_TYPES = ("local", "remote")


@app.command("show")
@command_wrapper(auth_required=False)
def show_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show the configured contexts."""
    service = get_config_service()
    current = service.config.current_context_name
    rows = [
        {
            "current": context.name == current,
            "name": context.name,
            "type": context.type,
            "source": context.source,
            "description": context.description,
        }
        for context in service.list_contexts()
    ]
    format_output(rows, output)


@app.command("use")
@command_wrapper(auth_required=False)
def use_context(name: str = typer.Argument(..., help="Context name")) -> None:
    """Switch the active context."""
    try:
        context = get_config_service().use_context(name)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    format_success(f"Switched to context '{context.name}' ({context.type})")


@app.command("add")
@command_wrapper(auth_required=False)
def add_context(
    name: str = typer.Argument(..., help="Context name"),
    context_type: str = typer.Option("local", "--type", help="local or remote"),
    source: str = typer.Option(..., "--source", help="Vault path or API URL"),
    description: str = typer.Option("", "--description", help="Description"),
) -> None:
    """Add a context."""
    if context_type not in CONTEXT_TYPES:
        raise ValidationError(f"Invalid context type '{context_type}' (use local or remote)")
    try:
        context = Context(name=name, type=context_type, source=source, description=description)
        get_config_service().add_context(context)
    except (PydanticValidationError, ValueError) as e:
        raise ValidationError(str(e)) from e
    format_success(f"Context '{name}' added")


@app.command("remove")
@command_wrapper(auth_required=False)
def remove_context(
    name: str = typer.Argument(..., help="Context name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove a context and its stored session."""
    if not yes and not typer.confirm(f"Remove context '{name}'?"):
        raise typer.Exit(0)
    try:
        get_config_service().remove_context(name)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    format_success(f"Context '{name}' removed")
