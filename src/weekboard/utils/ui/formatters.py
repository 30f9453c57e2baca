"""Output formatters for different formats."""

import json
from datetime import date
from typing import Any

import yaml
from rich.table import Table
from rich.text import Text

from weekboard.utils.ui.console import get_console

console = get_console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict], columns: list[str] | None = None) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = columns or list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


# ============================================================================
# Pretty Format Implementation
# ============================================================================

PRIORITY_ICONS = {
    "urgent": "🔴",
    "high": "🟠",
    "medium": "🟡",
    "low": "🟢",
}

PRIORITY_COLORS = {
    "urgent": "bold red",
    "high": "bold orange3",
    "medium": "bold yellow",
    "low": "green",
}

STATUS_ICONS = {
    "todo": "⬜",
    "in-progress": "🔄",
    "completed": "☑️",
    "blocked": "⛔",
}

# Columns shown by the table format for task lists
TASK_TABLE_COLUMNS = [
    "id",
    "title",
    "status",
    "priority",
    "week_of",
    "due_date",
    "estimated_hours",
    "actual_hours",
    "progress",
]


def short_id(task_id: str, length: int = 8) -> str:
    return task_id[:length]


def format_due_date(value: str | None) -> str:
    if not value:
        return ""
    return date.fromisoformat(value).strftime("%d/%m/%Y")


def format_pretty(data: Any) -> None:
    """Format data in pretty format with colors and icons."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict) and "week_of" in data[0]:
            format_tasks_pretty(data)
        else:
            for item in data:
                console.print(f"• {item}")
    elif isinstance(data, dict):
        if "week_of" in data:
            format_task_detail(data)
        else:
            for key, value in data.items():
                formatted_key = key.replace("_", " ").title()
                console.print(f"[cyan]{formatted_key}:[/cyan] {_cell(value)}")
    else:
        console.print(data)


def format_tasks_pretty(tasks: list[dict]) -> None:
    """Format tasks grouped by priority, most urgent first."""
    done = [t for t in tasks if t.get("status") == "completed"]

    header = Text()
    header.append("📋 Tasks ", style="bold cyan")
    header.append(f"({len(tasks) - len(done)} open", style="dim")
    if done:
        header.append(f", {len(done)} completed", style="dim green")
    header.append(")", style="dim")
    console.print(header)
    console.print()

    for priority in ("urgent", "high", "medium", "low"):
        group = [t for t in tasks if t.get("priority") == priority]
        if not group:
            continue
        console.print(
            f"{PRIORITY_ICONS[priority]} {priority.upper()}",
            style=PRIORITY_COLORS[priority],
        )
        for task in group:
            format_task_item(task, indent="  ")
        console.print()


def format_task_item(task: dict, indent: str = "") -> None:
    """Format a single task as a title line plus a metadata line."""
    status = task.get("status", "todo")
    title = Text(f"{indent}{STATUS_ICONS.get(status, '⬜')} ")
    title.append(task.get("title", "Untitled"), style="dim" if status == "completed" else "")
    for tag in task.get("tags", []):
        title.append(f" #{tag}", style="blue")
    console.print(title)

    meta = [(f"week {task.get('week_of')}", "cyan")]
    if task.get("due_date"):
        meta.append((f"due {format_due_date(task['due_date'])}", "cyan"))
    if task.get("progress"):
        meta.append((f"{task['progress']}%", "green"))
    if task.get("estimated_hours") or task.get("actual_hours"):
        meta.append(
            (f"{task.get('actual_hours', 0):g}h / {task.get('estimated_hours', 0):g}h", "")
        )
    if task.get("ticket_number"):
        meta.append((task["ticket_number"], "magenta"))
    if task.get("copied_from_week"):
        meta.append((f"copied from {task['copied_from_week']}", "yellow"))
    if task.get("id"):
        meta.append((f"#{short_id(task['id'])}", "dim"))

    meta_line = Text()
    meta_line.append(f"{indent}   └─ ", style="dim")
    for i, (text, style) in enumerate(meta):
        if i > 0:
            meta_line.append(" • ", style="dim")
        meta_line.append(text, style=style)
    console.print(meta_line)


def format_task_detail(task: dict) -> None:
    """Format one task with its comments and copy history."""
    format_task_item(task)
    if task.get("description"):
        console.print(f"\n{task['description']}")

    comments = task.get("comments") or []
    if comments:
        console.print(f"\n💬 Comments ({len(comments)})", style="bold")
        for comment in comments:
            console.print(f"  [dim]{comment['user_id']}:[/dim] {comment['content']}")

    history = task.get("copy_history") or []
    if history:
        console.print(f"\n📜 Copy history ({len(history)})", style="bold")
        format_copy_history(history)


def format_copy_history(history: list[dict]) -> None:
    for entry in history:
        line = Text("  ")
        line.append(f"{entry['copied_from_week']} → {entry['copied_to_week']}", style="cyan")
        if entry.get("copied_by"):
            line.append(f" by {entry['copied_by']}", style="yellow")
        if entry.get("copy_reason"):
            line.append(f" ({entry['copy_reason']})", style="dim")
        console.print(line)
