"""Configuration and context management commands."""

import typer
from pydantic import BaseModel, ValidationError

from weekboard.models.config_models import Context
from weekboard.services.config_service import get_config_service
from weekboard.utils.errors import InvalidArgumentError
from weekboard.utils.typer_helpers import SuggestingGroup
from weekboard.utils.ui.console import get_console
from weekboard.utils.ui.formatters import (
    format_dict_table,
    format_output,
    format_success,
    format_warning,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
context_app = typer.Typer(cls=SuggestingGroup, help="Manage storage contexts (local/remote)")
console = get_console()


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("yaml", "--output", "-o", help="Output format"),
) -> None:
    """Show the current configuration."""
    format_output(get_config_service().config.model_dump(mode="json"), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., board.weeks_count)"),
) -> None:
    """Get a configuration value."""
    value = get_config_service().get_setting(key)
    if isinstance(value, BaseModel):
        format_output(value.model_dump(mode="json"), "yaml")
    else:
        console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., copy_defaults.reset_status)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    config_service = get_config_service()
    config_service.set_setting(key, value)
    format_success(f"Configuration '{key}' set to '{config_service.get_setting(key)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration and stored credentials to defaults."""
    if not yes and not typer.confirm("Reset the entire configuration?"):
        format_warning("Cancelled")
        raise typer.Exit(0)

    get_config_service().reset_config()
    format_success("Configuration reset to defaults")


@context_app.command("list")
@command_wrapper
def list_contexts() -> None:
    """List all contexts."""
    config_service = get_config_service()
    current = config_service.config.current_context_name
    rows = [
        {
            "current": ctx.name == current,
            "name": ctx.name,
            "type": ctx.type,
            "source": ctx.source,
            "user_id": ctx.user_id,
        }
        for ctx in config_service.list_contexts()
    ]
    format_dict_table(rows)


@context_app.command("use")
@command_wrapper
def use_context(
    name: str = typer.Argument(..., help="Context name"),
) -> None:
    """Switch the active context."""
    try:
        context = get_config_service().use_context(name)
    except ValueError as e:
        raise InvalidArgumentError(str(e)) from e
    format_success(f"Switched to context '{context.name}' ({context.type})")


@context_app.command("add")
@command_wrapper
def add_context(
    name: str = typer.Argument(..., help="Context name"),
    type_: str = typer.Option("local", "--type", "-t", help="local or remote"),
    source: str = typer.Option(..., "--source", "-s", help="Database path or API URL"),
    user: str | None = typer.Option(None, "--user", "-u", help="Default user ID"),
    description: str = typer.Option("", "--description", help="Description"),
    token: str | None = typer.Option(None, "--token", help="Bearer token for remote contexts"),
) -> None:
    """Add a storage context."""
    try:
        context = Context(
            name=name, type=type_, source=source, user_id=user, description=description
        )
        get_config_service().add_context(context)
    except (ValidationError, ValueError) as e:
        raise InvalidArgumentError(str(e)) from e

    if token:
        get_config_service().save_credentials(token, context_name=name)
    format_success(f"Context '{name}' added")


@context_app.command("remove")
@command_wrapper
def remove_context(
    name: str = typer.Argument(..., help="Context name"),
) -> None:
    """Remove a context and its credentials."""
    try:
        get_config_service().remove_context(name)
    except ValueError as e:
        raise InvalidArgumentError(str(e)) from e
    format_success(f"Context '{name}' removed")
