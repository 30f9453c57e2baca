"""Weekly board, statistics and report commands."""

import typer

from weekboard.services.board_service import build_board
from weekboard.services.config_service import (
    get_config_service,
    get_storage_strategy_context,
)
from weekboard.services.notification_service import (
    LogNotificationSink,
    NotificationService,
)
from weekboard.services.task_service import get_task_service
from weekboard.utils.errors import StoreError
from weekboard.utils.exit_codes import ERROR_STORE
from weekboard.utils.ui.board_view import render_board, render_week_stats
from weekboard.utils.ui.console import get_console
from weekboard.utils.ui.formatters import format_error, format_output, format_success
from weekboard.utils.weeks import (
    available_weeks,
    current_week_key,
    format_week_key,
    week_range,
)

from .decorators import command_wrapper
from .utils import resolve_output, resolve_user_id, resolve_week

console = get_console()


@command_wrapper
async def board(
    week: str | None = typer.Option(None, "--week", "-w", help="Any date in the week"),
    user: str | None = typer.Option(None, "--user", "-u", help="Assignee ID"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show a week's tasks as a Kanban board."""
    week_key = resolve_week(week)
    user_id = resolve_user_id(user)

    tasks = await get_task_service().tasks_by_week(user_id, week_key)
    columns = build_board(tasks, get_config_service().config.board.column_limits)

    output = resolve_output(output)
    if output == "pretty":
        render_board(columns, title=f"Week {week_range(week_key).label()}")
    else:
        format_output([column.model_dump(mode="json") for column in columns], output)


@command_wrapper
def weeks(
    count: int | None = typer.Option(None, "--count", "-n", help="Neighbouring weeks to list"),
    week: str | None = typer.Option(None, "--week", "-w", help="Week to centre on"),
) -> None:
    """List the weeks around the current one."""
    if count is None:
        count = get_config_service().config.board.weeks_count
    centre = resolve_week(week)
    this_week = current_week_key()

    for key in available_weeks(centre, count):
        marker = " [bold green]← current[/bold green]" if key == this_week else ""
        console.print(f"{format_week_key(key)}  {week_range(key).label()}{marker}")


@command_wrapper
async def stats(
    week: str | None = typer.Option(None, "--week", "-w", help="Any date in the week"),
    user: str | None = typer.Option(None, "--user", "-u", help="Assignee ID"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show task counts and hours for a week."""
    week_key = resolve_week(week)
    week_stats = await get_task_service().week_stats(resolve_user_id(user), week_key)

    output = resolve_output(output)
    if output == "pretty":
        render_week_stats(week_stats, title=f"Week {week_range(week_key).label()}")
    else:
        format_output(week_stats.model_dump(mode="json"), output)


@command_wrapper
async def notify(
    user: str | None = typer.Option(None, "--user", "-u", help="User to report to"),
    week: str | None = typer.Option(None, "--week", "-w", help="Any date in the week"),
) -> None:
    """Send the weekly task report for a user."""
    settings = get_config_service().config.notifications
    if not settings.enabled:
        format_error("Notifications are disabled (notifications.enabled)")
        raise typer.Exit(1)

    week_key = resolve_week(week)
    recipient = await get_storage_strategy_context().user_repository.get(
        resolve_user_id(user)
    )
    try:
        tasks = await get_task_service().report_tasks(recipient.id, week_key)
    except StoreError as e:
        format_error(f"Weekly report to {recipient.email} not sent: {e}")
        raise typer.Exit(ERROR_STORE) from e

    service = NotificationService(LogNotificationSink(sender=settings.sender))
    if await service.notify(recipient, tasks, week_key):
        format_success(f"Weekly report sent to {recipient.email}")
    else:
        format_error(f"Weekly report to {recipient.email} could not be sent")
        raise typer.Exit(1)
