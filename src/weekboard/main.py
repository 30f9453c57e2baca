"""Main entry point for weekboard."""

import typer

from weekboard import __version__
from weekboard.commands import board_command, config_command, tasks_command, users_command
from weekboard.services.config_service import get_config_service
from weekboard.utils.typer_helpers import SuggestingGroup
from weekboard.utils.ui.console import get_console

app = typer.Typer(
    name="weekboard",
    cls=SuggestingGroup,
    help="Weekly task board: plan tasks per week, move cards, copy work forward",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(tasks_command.app, name="tasks", help="Task management commands")
app.add_typer(users_command.app, name="users", help="User commands")
app.add_typer(config_command.app, name="config", help="Configuration management")
app.add_typer(config_command.context_app, name="context", help="Storage contexts")

app.command("board")(board_command.board)
app.command("weeks")(board_command.weeks)
app.command("stats")(board_command.stats)
app.command("notify")(board_command.notify)


@app.command()
def version() -> None:
    """Show version and active storage context."""
    console.print(f"[bold]weekboard[/bold] version [cyan]{__version__}[/cyan]")
    context = get_config_service().get_current_context()
    console.print(f"[dim]Context:[/dim] {context.name} ({context.type}) {context.source}")


if __name__ == "__main__":
    app()
