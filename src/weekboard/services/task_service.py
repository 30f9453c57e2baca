"""Task service - Business logic for task operations.

This service layer sits between commands and repositories. Validation
problems raise InvalidArgumentError before anything is written; store
failures are logged here and reported as False, None or an empty list.
"""

from __future__ import annotations

import logging
from datetime import date

from pydantic import ValidationError

from weekboard.models import (
    TASK_STATUSES,
    CopySettings,
    Task,
    TaskCopyHistory,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    WeekStats,
)
from weekboard.repositories import TaskRepository
from weekboard.services.board_service import compute_week_stats
from weekboard.services.copy_service import build_task_copy
from weekboard.utils.errors import (
    InvalidArgumentError,
    NotFoundError,
    PartialCopyError,
    StoreError,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task business logic.

    Orchestrates task operations using the task repository chosen by the
    storage strategy.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        copy_defaults: CopySettings | None = None,
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            copy_defaults: Settings used when copy_task gets none
        """
        self.repository = task_repository
        self.copy_defaults = copy_defaults or CopySettings()

    async def list_tasks(
        self,
        *,
        assignee_id: str | None = None,
        week_of: date | None = None,
        weeks: list[date] | None = None,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[Task]:
        """List tasks matching every given criterion.

        Returns:
            Matching tasks, or an empty list if the store fails

        Raises:
            InvalidArgumentError: If a filter value is malformed
        """
        try:
            filters = TaskFilters(
                assignee_id=assignee_id,
                week_of=week_of,
                weeks=weeks,
                status=status,
                priority=priority,
                search=search,
                sort=sort,
                limit=limit,
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid task filter: {e}") from e

        try:
            return await self.repository.list_all(filters)
        except StoreError as e:
            logger.error("listing tasks failed: %s", e)
            return []

    async def tasks_by_week(self, user_id: str, week: date) -> list[Task]:
        """A user's tasks in one week, newest first."""
        return await self.list_tasks(
            assignee_id=user_id, week_of=week, sort="created_at:desc"
        )

    async def report_tasks(self, user_id: str, week: date) -> list[Task]:
        """A user's tasks in one week for a report.

        Unlike tasks_by_week, store failures propagate to the caller.

        Raises:
            StoreError: If the store cannot list the tasks
        """
        return await self.repository.list_all(
            TaskFilters(assignee_id=user_id, week_of=week, sort="created_at:desc")
        )

    async def tasks_by_weeks(self, user_id: str, weeks: list[date]) -> list[Task]:
        """A user's tasks across several weeks, latest week first."""
        return await self.list_tasks(assignee_id=user_id, weeks=weeks)

    async def search_tasks(self, user_id: str, term: str) -> list[Task]:
        return await self.list_tasks(assignee_id=user_id, search=term)

    async def tasks_by_priority(self, user_id: str, priority: str) -> list[Task]:
        """A user's tasks of one priority, soonest due first."""
        return await self.list_tasks(
            assignee_id=user_id, priority=priority, sort="due_date:asc"
        )

    async def week_stats(self, user_id: str, week: date) -> WeekStats:
        """Counts and hours for a user's week; zeros if the store fails."""
        return compute_week_stats(await self.tasks_by_week(user_id, week))

    async def get_task(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        return await self.repository.get(task_id)

    async def add_task(
        self,
        title: str,
        *,
        assignee_id: str,
        week_of: date,
        description: str = "",
        status: str = "todo",
        priority: str = "medium",
        due_date: date | None = None,
        estimated_hours: float = 0,
        ticket_number: str | None = None,
        tags: list[str] | None = None,
    ) -> Task | None:
        """Create a new task.

        Returns:
            Created Task object, or None if the store fails

        Raises:
            InvalidArgumentError: If the task data is invalid
        """
        try:
            task_data = TaskCreate(
                title=title,
                assignee_id=assignee_id,
                week_of=week_of,
                description=description,
                status=status,
                priority=priority,
                due_date=due_date,
                estimated_hours=estimated_hours,
                ticket_number=ticket_number,
                tags=tags or [],
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid task: {e}") from e

        try:
            return await self.repository.add(task_data)
        except StoreError as e:
            logger.error("adding task failed: %s", e)
            return None

    async def update_task(self, task_id: str, updates: TaskUpdate) -> bool:
        """Apply a partial update.

        Returns:
            True on success, False if the task is missing or the store fails
        """
        try:
            await self.repository.update(task_id, updates)
        except (StoreError, NotFoundError) as e:
            logger.error("updating task %s failed: %s", task_id, e)
            return False
        return True

    async def delete_task(self, task_id: str) -> bool:
        try:
            return await self.repository.delete(task_id)
        except (StoreError, NotFoundError) as e:
            logger.error("deleting task %s failed: %s", task_id, e)
            return False

    async def move_status(self, task_id: str, new_status: str) -> bool:
        """Move a task to another Kanban column.

        Only the status changes. Any status may follow any other, including
        itself.

        Raises:
            InvalidArgumentError: If ``new_status`` is not a known status
        """
        if new_status not in TASK_STATUSES:
            raise InvalidArgumentError(
                f"Invalid status '{new_status}'. Choose from: {', '.join(TASK_STATUSES)}"
            )
        moved = await self.update_task(task_id, TaskUpdate(status=new_status))
        if moved:
            logger.info("moved task %s to %s", task_id, new_status)
        return moved

    async def copy_task(
        self,
        source: Task,
        target_week: date | None,
        settings: CopySettings | None = None,
        reason: str = "",
        copied_by: str = "",
    ) -> Task | None:
        """Copy ``source`` into ``target_week`` and extend both histories.

        Returns:
            The new task. It is returned even when the source's history could
            not be updated, since the copy exists in the store. None if the
            copy could not be created.

        Raises:
            InvalidArgumentError: If no target week is given, or ``source``
                is older than the stored task and would drop history entries
        """
        task_data = build_task_copy(
            source, target_week, settings or self.copy_defaults, reason, copied_by
        )

        try:
            created = await self.repository.add_copy(task_data, source.id)
        except PartialCopyError as e:
            logger.error(
                "task %s copied to %s but source copy history is stale: %s",
                e.source_id,
                e.created_task.id,
                e,
            )
            return e.created_task
        except (StoreError, NotFoundError) as e:
            logger.error("copying task %s failed: %s", source.id, e)
            return None

        logger.info(
            "copied task %s from %s to %s as %s",
            source.id,
            source.week_of,
            target_week,
            created.id,
        )
        return created

    async def copy_history(self, task_id: str) -> list[TaskCopyHistory]:
        """Copy ledger of a task, oldest entry first."""
        task = await self.get_task(task_id)
        return task.copy_history


def get_task_service() -> TaskService:
    """Build a TaskService over the active storage context."""
    from weekboard.services.config_service import get_config_service

    config_service = get_config_service()
    return TaskService(
        config_service.storage_strategy_context.task_repository,
        copy_defaults=config_service.config.copy_defaults,
    )
