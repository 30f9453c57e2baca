"""Rich rendering of the Kanban board and week statistics."""

from __future__ import annotations

from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from weekboard.models import KanbanColumn, WeekStats
from weekboard.utils.ui.console import get_console
from weekboard.utils.ui.formatters import PRIORITY_ICONS, short_id

console = get_console()

COLUMN_STYLES = {
    "todo": "red",
    "in-progress": "yellow",
    "completed": "green",
    "blocked": "magenta",
}


def render_column(column: KanbanColumn) -> Panel:
    """One column as a panel of cards."""
    body = Text()
    if not column.tasks:
        body.append("No tasks", style="dim italic")
    for i, task in enumerate(column.tasks):
        if i:
            body.append("\n\n")
        body.append(f"{PRIORITY_ICONS[task.priority]} {task.title}", style="bold")
        body.append(f"\n#{short_id(task.id)}", style="dim")
        if task.estimated_hours:
            body.append(f"  {task.actual_hours:g}h/{task.estimated_hours:g}h", style="dim")
        if task.progress:
            body.append(f"  {task.progress}%", style="green")

    count = f"{len(column.tasks)}"
    if column.max_tasks is not None:
        count += f"/{column.max_tasks}"
    border = "bold red" if column.over_limit else COLUMN_STYLES[column.status]
    return Panel(
        body,
        title=f"{column.title} ({count})",
        border_style=border,
        width=32,
    )


def render_board(columns: list[KanbanColumn], title: str = "") -> None:
    if title:
        console.print(f"[bold cyan]{title}[/bold cyan]\n")
    console.print(Columns([render_column(column) for column in columns]))


def render_week_stats(stats: WeekStats, title: str = "Week summary") -> None:
    table = Table(title=title, show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total tasks", str(stats.total))
    table.add_row("Completed", str(stats.completed))
    table.add_row("In progress", str(stats.in_progress))
    table.add_row("Pending", str(stats.pending))
    table.add_row("Blocked", str(stats.blocked))
    table.add_row("Estimated hours", f"{stats.total_estimated:g}h")
    table.add_row("Hours worked", f"{stats.total_actual:g}h")
    console.print(table)
