"""Exception hierarchy shared by services, adapters and commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from weekboard.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
    ERROR_STORE,
)

if TYPE_CHECKING:
    from weekboard.models import Task


class WeekboardError(Exception):
    """Base class for all weekboard errors."""

    exit_code: int = ERROR_GENERAL


class InvalidArgumentError(WeekboardError, ValueError):
    """A caller supplied a missing or malformed argument.

    Raised before any write reaches the store.
    """

    exit_code = ERROR_INVALID_ARGS


class NotFoundError(WeekboardError, LookupError):
    """A referenced record does not exist in the store."""

    exit_code = ERROR_NOT_FOUND


class TaskNotFoundError(NotFoundError):
    """Task lookup by id failed."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class UserNotFoundError(NotFoundError):
    """User lookup by id failed."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class StoreError(WeekboardError):
    """The backing store failed (network, auth, constraint, I/O)."""

    exit_code = ERROR_STORE


class PartialCopyError(StoreError):
    """A copy created the new task but could not update the source history.

    Attributes:
        created_task: The task that now exists in the store
        source_id: Task whose copy history is stale
    """

    def __init__(self, created_task: Task, source_id: str, reason: str):
        super().__init__(
            f"Copied task {created_task.id} was created but the copy history "
            f"of {source_id} was not updated: {reason}"
        )
        self.created_task = created_task
        self.source_id = source_id
