"""Task management commands."""

import typer
from pydantic import ValidationError

from weekboard.models import TaskUpdate
from weekboard.services.board_service import move_card
from weekboard.services.config_service import get_config_service
from weekboard.services.task_service import get_task_service
from weekboard.utils.errors import InvalidArgumentError, StoreError
from weekboard.utils.task_helpers import resolve_task
from weekboard.utils.typer_helpers import SuggestingGroup
from weekboard.utils.ui.console import get_console
from weekboard.utils.ui.formatters import (
    TASK_TABLE_COLUMNS,
    format_copy_history,
    format_dict_table,
    format_output,
    format_success,
    format_warning,
)
from weekboard.utils.weeks import parse_week_key

from .decorators import command_wrapper
from .utils import (
    resolve_output,
    resolve_user_id,
    resolve_week,
    split_tags,
    tasks_to_dicts,
)

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()


def _show_tasks(tasks: list[dict], output: str) -> None:
    if output == "table":
        format_dict_table(tasks, TASK_TABLE_COLUMNS)
    else:
        format_output(tasks, output)


@app.command("list")
@command_wrapper
async def list_tasks(
    week: str | None = typer.Option(None, "--week", "-w", help="Any date in the week"),
    user: str | None = typer.Option(None, "--user", "-u", help="Assignee ID"),
    status: str | None = typer.Option(None, "--status", help="Filter by status"),
    priority: str | None = typer.Option(None, "--priority", help="Filter by priority"),
    search: str | None = typer.Option(None, "--search", help="Search title, description, ticket"),
    sort: str | None = typer.Option(None, "--sort", help="e.g. due_date:asc"),
    limit: int | None = typer.Option(None, "--limit", help="Limit results"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List tasks."""
    task_service = get_task_service()
    assignee = user or get_config_service().get_current_context().user_id

    tasks = await task_service.list_tasks(
        assignee_id=assignee,
        week_of=resolve_week(week) if week else None,
        status=status,
        priority=priority,
        search=search,
        sort=sort,
        limit=limit,
    )
    _show_tasks(tasks_to_dicts(tasks), resolve_output(output))


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    user: str | None = typer.Option(None, "--user", "-u", help="Assignee ID"),
    week: str | None = typer.Option(None, "--week", "-w", help="Any date in the week"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    status: str = typer.Option("todo", "--status", help="Initial status"),
    priority: str = typer.Option("medium", "--priority", "-p", help="Priority"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    hours: float = typer.Option(0, "--hours", help="Estimated hours"),
    ticket: str | None = typer.Option(None, "--ticket", help="Ticket number"),
    tags: str | None = typer.Option(None, "--tags", help="Comma-separated tags"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Create a new task."""
    task_service = get_task_service()

    task = await task_service.add_task(
        title,
        assignee_id=resolve_user_id(user),
        week_of=resolve_week(week),
        description=description,
        status=status,
        priority=priority,
        due_date=parse_week_key(due) if due else None,
        estimated_hours=hours,
        ticket_number=ticket,
        tags=split_tags(tags),
    )
    if task is None:
        raise StoreError("Task could not be saved")

    format_success(f"Task created: {task.id}")
    format_output(task.model_dump(mode="json"), resolve_output(output))


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show task details, comments and copy history."""
    task = await resolve_task(get_task_service(), task_id)
    format_output(task.model_dump(mode="json"), resolve_output(output))


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    status: str | None = typer.Option(None, "--status", help="Status"),
    priority: str | None = typer.Option(None, "--priority", "-p", help="Priority"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    hours: float | None = typer.Option(None, "--hours", help="Estimated hours"),
    actual: float | None = typer.Option(None, "--actual", help="Hours worked"),
    progress: int | None = typer.Option(None, "--progress", help="Progress (0-100)"),
    ticket: str | None = typer.Option(None, "--ticket", help="Ticket number"),
    tags: str | None = typer.Option(None, "--tags", help="Comma-separated tags"),
) -> None:
    """Update fields of a task."""
    if due and clear_due:
        raise InvalidArgumentError("--due and --clear-due cannot be combined")

    fields = {
        "title": title,
        "description": description,
        "status": status,
        "priority": priority,
        "due_date": parse_week_key(due) if due else None,
        "estimated_hours": hours,
        "actual_hours": actual,
        "progress": progress,
        "ticket_number": ticket,
        "tags": split_tags(tags),
    }
    changes = {name: value for name, value in fields.items() if value is not None}
    if clear_due:
        changes["due_date"] = None
    if not changes:
        raise InvalidArgumentError("Nothing to update. Pass at least one field option")

    try:
        updates = TaskUpdate(**changes)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid update: {e}") from e

    task_service = get_task_service()
    task = await resolve_task(task_service, task_id)
    if not await task_service.update_task(task.id, updates):
        raise StoreError(f"Task {task.id} could not be updated")
    format_success(f"Task updated: {task.id}")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task and its comments."""
    task_service = get_task_service()
    task = await resolve_task(task_service, task_id)

    if not yes and not typer.confirm(f"Delete task '{task.title}'?"):
        format_warning("Cancelled")
        raise typer.Exit(0)

    if not await task_service.delete_task(task.id):
        raise StoreError(f"Task {task.id} could not be deleted")
    format_success(f"Task deleted: {task.id}")


@app.command("move")
@command_wrapper
async def move_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    status: str = typer.Argument(..., help="todo, in-progress, completed or blocked"),
) -> None:
    """Move a task to another board column."""
    task_service = get_task_service()
    task = await resolve_task(task_service, task_id)

    if await move_card(task_service, task.id, task.status, status):
        format_success(f"Task {task.id} moved to {status}")
    elif task.status == status:
        format_warning(f"Task {task.id} is already in {status}")
    else:
        raise StoreError(f"Task {task.id} could not be moved")


@app.command("copy")
@command_wrapper
async def copy_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    to: str = typer.Option(..., "--to", help="Any date in the target week"),
    reason: str = typer.Option("", "--reason", "-r", help="Why the task is copied"),
    by: str | None = typer.Option(None, "--by", help="User performing the copy"),
    keep_status: bool = typer.Option(
        False, "--keep-status", help="Keep status and progress instead of resetting"
    ),
    no_comments: bool = typer.Option(False, "--no-comments", help="Do not copy comments"),
    with_hours: bool = typer.Option(False, "--with-hours", help="Copy hours worked"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Copy a task into another week."""
    target_week = resolve_week(to)

    overrides = {}
    if keep_status:
        overrides["reset_status"] = False
    if no_comments:
        overrides["include_comments"] = False
    if with_hours:
        overrides["include_actual_hours"] = True
    settings = get_config_service().config.copy_defaults.model_copy(update=overrides)
    copied_by = by or get_config_service().get_current_context().user_id or ""

    task_service = get_task_service()
    source = await resolve_task(task_service, task_id)
    created = await task_service.copy_task(
        source, target_week, settings, reason=reason, copied_by=copied_by
    )
    if created is None:
        raise StoreError(f"Task {source.id} could not be copied")

    format_success(f"Task copied to week {target_week}: {created.id}")
    format_output(created.model_dump(mode="json"), resolve_output(output))


@app.command("history")
@command_wrapper
async def task_history(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show the copy history of a task."""
    task_service = get_task_service()
    task = await resolve_task(task_service, task_id)
    history = [
        entry.model_dump(mode="json")
        for entry in await task_service.copy_history(task.id)
    ]

    output = resolve_output(output)
    if output != "pretty":
        format_output(history, output)
    elif not history:
        console.print("[yellow]Task has never been copied[/yellow]")
    else:
        format_copy_history(history)
