"""Kanban board grouping and week statistics."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from weekboard.models import KanbanColumn, Task, WeekStats

if TYPE_CHECKING:
    from weekboard.services.task_service import TaskService

# (status, title) in display order
BOARD_COLUMNS = (
    ("todo", "To Do"),
    ("in-progress", "In Progress"),
    ("completed", "Completed"),
    ("blocked", "Blocked"),
)


def build_board(
    tasks: Iterable[Task], max_tasks: Mapping[str, int] | None = None
) -> list[KanbanColumn]:
    """Group tasks into the four status columns.

    Args:
        tasks: Tasks of one week; input order is kept within a column
        max_tasks: Optional work-in-progress limit per status
    """
    limits = max_tasks or {}
    columns = {
        status: KanbanColumn(
            id=status, title=title, status=status, max_tasks=limits.get(status)
        )
        for status, title in BOARD_COLUMNS
    }
    for task in tasks:
        columns[task.status].tasks.append(task)
    return list(columns.values())


def compute_week_stats(tasks: Iterable[Task]) -> WeekStats:
    stats = WeekStats()
    for task in tasks:
        stats.total += 1
        stats.total_estimated += task.estimated_hours
        stats.total_actual += task.actual_hours
        if task.status == "completed":
            stats.completed += 1
        elif task.status == "in-progress":
            stats.in_progress += 1
        elif task.status == "blocked":
            stats.blocked += 1
        else:
            stats.pending += 1
    return stats


async def move_card(
    service: TaskService, task_id: str, from_status: str, to_status: str
) -> bool:
    """Handle a card dropped on a column.

    Dropping a card back on its own column does nothing and returns False.
    """
    if from_status == to_status:
        return False
    return await service.move_status(task_id, to_status)
