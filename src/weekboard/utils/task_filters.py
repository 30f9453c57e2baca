"""In-memory task filtering and ordering.

Each predicate checks one TaskFilters criterion; ``filter_tasks`` composes
every criterion that is set. Used on documents fetched from the remote
store and by the service for client-side narrowing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date

from weekboard.models import TASK_PRIORITIES, Task, TaskFilters

TaskPredicate = Callable[[Task], bool]

DEFAULT_SORT = ("week_of:desc", "created_at:desc")

_PRIORITY_RANK = {name: rank for rank, name in enumerate(TASK_PRIORITIES)}


def by_assignee(assignee_id: str) -> TaskPredicate:
    return lambda task: task.assignee_id == assignee_id


def by_weeks(weeks: Iterable[date]) -> TaskPredicate:
    wanted = frozenset(weeks)
    return lambda task: task.week_of in wanted


def by_status(status: str) -> TaskPredicate:
    return lambda task: task.status == status


def by_priority(priority: str) -> TaskPredicate:
    return lambda task: task.priority == priority


def by_text(term: str) -> TaskPredicate:
    """Case-insensitive substring match over title, description and ticket."""
    needle = term.casefold()

    def matches(task: Task) -> bool:
        haystacks = (task.title, task.description, task.ticket_number or "")
        return any(needle in text.casefold() for text in haystacks)

    return matches


def build_predicates(filters: TaskFilters) -> list[TaskPredicate]:
    """Translate the set criteria of ``filters`` into predicates."""
    predicates: list[TaskPredicate] = []
    if filters.assignee_id:
        predicates.append(by_assignee(filters.assignee_id))
    if filters.week_of is not None:
        predicates.append(by_weeks([filters.week_of]))
    if filters.weeks is not None:
        predicates.append(by_weeks(filters.weeks))
    if filters.status:
        predicates.append(by_status(filters.status))
    if filters.priority:
        predicates.append(by_priority(filters.priority))
    if filters.search:
        predicates.append(by_text(filters.search))
    return predicates


def matches_filters(task: Task, filters: TaskFilters) -> bool:
    return all(predicate(task) for predicate in build_predicates(filters))


def _sort_value(task: Task, field: str):
    if field == "priority":
        return _PRIORITY_RANK[task.priority]
    value = getattr(task, field)
    if value is None:
        # only due_date is nullable; placed by the undated pass in sort_tasks
        return date.min
    return value


def sort_tasks(tasks: Iterable[Task], sort: str | None = None) -> list[Task]:
    """Order tasks by ``"field:dir"``; defaults to newest week, newest first.

    Undated tasks go last in either direction, as in the SQLite store.
    """
    keys = [sort] if sort else list(DEFAULT_SORT)
    ordered = list(tasks)
    # Stable sorts applied from the least significant key
    for key in reversed(keys):
        field, _, direction = key.partition(":")
        ordered.sort(
            key=lambda task, f=field: _sort_value(task, f),
            reverse=direction == "desc",
        )
        if field == "due_date":
            ordered.sort(key=lambda task: task.due_date is None)
    return ordered


def filter_tasks(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    """Apply all criteria, ordering and limit of ``filters`` to ``tasks``."""
    predicates = build_predicates(filters)
    selected = [task for task in tasks if all(p(task) for p in predicates)]
    selected = sort_tasks(selected, filters.sort)
    if filters.limit is not None:
        selected = selected[: filters.limit]
    return selected
