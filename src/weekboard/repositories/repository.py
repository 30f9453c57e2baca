"""Repository abstraction layer for weekboard.

This module defines the abstract base classes (interfaces) for the task and
user stores, following the hexagonal architecture (Ports & Adapters) pattern.

Business logic depends only on these contracts; the relational (SQLite) and
document (REST) adapters are interchangeable behind them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from weekboard.models import (
    Task,
    TaskCopyHistory,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    User,
)
from weekboard.utils.errors import (
    InvalidArgumentError,
    NotFoundError,
    PartialCopyError,
    StoreError,
)


def ensure_history_extends(
    task_id: str,
    current: list[TaskCopyHistory],
    proposed: list[TaskCopyHistory],
) -> None:
    """Reject a copy history that drops, edits or fails to add entries."""
    stored = [entry.model_dump(mode="json") for entry in current]
    incoming = [entry.model_dump(mode="json") for entry in proposed]
    if len(incoming) <= len(stored) or incoming[: len(stored)] != stored:
        raise InvalidArgumentError(
            f"Copy history of task {task_id} is append-only: "
            f"{len(stored)} stored entries must be kept and new ones added"
        )


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Adapters raise TaskNotFoundError for unknown ids and StoreError for
    backend failures.
    """

    @abstractmethod
    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List tasks matching ``filters``.

        Args:
            filters: TaskFilters object specifying filter criteria

        Returns:
            List of Task objects matching the filters
        """
        raise NotImplementedError(
            "TaskRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            TaskNotFoundError: If task does not exist
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task.

        Args:
            task_data: TaskCreate object with task details

        Returns:
            Created Task object with generated ID and timestamps
        """
        raise NotImplementedError("TaskRepository.add() must be implemented by adapter")

    @abstractmethod
    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        """Apply a typed partial update to an existing task.

        Only the fields reported by ``updates.changed_fields()`` are written.

        Raises:
            TaskNotFoundError: If task does not exist
        """
        raise NotImplementedError(
            "TaskRepository.update() must be implemented by adapter"
        )

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task and its comments.

        Returns:
            True if deletion was successful
        """
        raise NotImplementedError(
            "TaskRepository.delete() must be implemented by adapter"
        )

    async def update_copy_history(
        self, task_id: str, copy_history: list[TaskCopyHistory]
    ) -> Task:
        """Extend a task's copy history to ``copy_history``.

        Raises:
            InvalidArgumentError: If ``copy_history`` does not extend the
                stored ledger
        """
        task = await self.get(task_id)
        ensure_history_extends(task_id, task.copy_history, copy_history)
        return await self.write_copy_history(task_id, copy_history)

    @abstractmethod
    async def write_copy_history(
        self, task_id: str, copy_history: list[TaskCopyHistory]
    ) -> Task:
        """Store ``copy_history`` on a task without checking it.

        Only update_copy_history calls this, after the append-only check.
        """
        raise NotImplementedError(
            "TaskRepository.write_copy_history() must be implemented by adapter"
        )

    async def add_copy(self, task_data: TaskCreate, source_id: str) -> Task:
        """Create a copied task and write its history back onto the source.

        This default performs two independent writes. Adapters whose store
        supports transactions override it to make the pair atomic.

        Raises:
            PartialCopyError: The copy exists but the source was not updated
        """
        created = await self.add(task_data)
        try:
            await self.update_copy_history(source_id, task_data.copy_history)
        except (StoreError, NotFoundError, InvalidArgumentError) as e:
            raise PartialCopyError(created, source_id, str(e)) from e
        return created


class UserRepository(ABC):
    """Read-only lookup of user reference data."""

    @abstractmethod
    async def list_all(self) -> list[User]:
        """List all known users."""
        raise NotImplementedError(
            "UserRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, user_id: str) -> User:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If user does not exist
        """
        raise NotImplementedError("UserRepository.get() must be implemented by adapter")
