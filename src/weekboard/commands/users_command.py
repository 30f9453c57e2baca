"""User reference data commands."""

import typer

from weekboard.adapters.sqlite import SqliteUserRepository
from weekboard.services.config_service import get_storage_strategy_context
from weekboard.utils.errors import InvalidArgumentError
from weekboard.utils.typer_helpers import SuggestingGroup
from weekboard.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .utils import resolve_output

app = typer.Typer(cls=SuggestingGroup, help="User commands")


@app.command("list")
@command_wrapper
async def list_users(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List known users."""
    users = await get_storage_strategy_context().user_repository.list_all()
    output = resolve_output(output)
    format_output(
        [u.model_dump(mode="json", include={"id", "email", "name", "long_name"}) for u in users],
        "table" if output == "pretty" else output,
    )


@app.command("add")
@command_wrapper
async def add_user(
    name: str = typer.Argument(..., help="Short name"),
    email: str = typer.Option(..., "--email", help="Email address"),
    long_name: str = typer.Option("", "--long-name", help="Full name used in reports"),
    role: str = typer.Option("", "--role", help="Role"),
    department: str = typer.Option("", "--department", help="Department"),
) -> None:
    """Register a user in the local store."""
    repository = get_storage_strategy_context().user_repository
    if not isinstance(repository, SqliteUserRepository):
        raise InvalidArgumentError("Users can only be added to a local context")

    user = await repository.add(
        email, name, long_name=long_name, role=role, department=department
    )
    format_success(f"User created: {user.id}")
