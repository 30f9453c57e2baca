"""Task helper utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from weekboard.utils.errors import InvalidArgumentError, NotFoundError, TaskNotFoundError

if TYPE_CHECKING:
    from weekboard.models import Task
    from weekboard.services.task_service import TaskService


async def resolve_task(task_service: TaskService, task_id_or_prefix: str) -> Task:
    """
    Resolve a full task ID or the short prefix shown in listings to a task.

    Raises:
        TaskNotFoundError: If no task matches
        InvalidArgumentError: If the prefix matches more than one task
    """
    try:
        return await task_service.get_task(task_id_or_prefix)
    except NotFoundError:
        pass

    tasks = await task_service.list_tasks()
    matching = [task for task in tasks if task.id.startswith(task_id_or_prefix)]

    if not matching:
        raise TaskNotFoundError(task_id_or_prefix)
    if len(matching) > 1:
        candidates = ", ".join(f"{t.id[:12]} ({t.title})" for t in matching[:5])
        raise InvalidArgumentError(
            f"ID prefix '{task_id_or_prefix}' is ambiguous: {candidates}"
        )
    return matching[0]
