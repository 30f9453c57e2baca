"""REST API adapters - Repository implementations backed by the document API.

Documents are camelCase JSON with comments embedded in the task. The API has
no multi-document transaction, so ``add_copy`` keeps the repository default
(create, then patch the source).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import httpx

from weekboard.models import (
    Task,
    TaskCopyHistory,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    User,
)
from weekboard.repositories.repository import TaskRepository, UserRepository
from weekboard.services.api.client import APIClient
from weekboard.services.api.tasks import TasksAPI
from weekboard.services.api.users import UsersAPI
from weekboard.utils.errors import (
    NotFoundError,
    StoreError,
    TaskNotFoundError,
    UserNotFoundError,
)
from weekboard.utils.task_filters import filter_tasks

logger = logging.getLogger(__name__)


@contextmanager
def translate_http_errors(
    action: str, not_found: NotFoundError | None = None
) -> Iterator[None]:
    """Re-raise httpx failures as weekboard errors.

    A 404 becomes ``not_found`` when given; everything else is a StoreError.
    """
    try:
        yield
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404 and not_found is not None:
            raise not_found from e
        raise StoreError(
            f"{action} failed: HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise StoreError(f"{action} failed: {e}") from e


def _documents(result: dict | list, key: str) -> list[dict]:
    # API returns either a bare array or {"<key>": [...]}
    if isinstance(result, dict):
        return result.get(key, [])
    return result


class RestApiTaskRepository(TaskRepository):
    """Task repository implementation using the document API."""

    def __init__(self, client: APIClient | None = None):
        self._client = client
        self._tasks_api: TasksAPI | None = None

    @property
    def tasks_api(self) -> TasksAPI:
        """Get or create TasksAPI instance."""
        if self._tasks_api is None:
            if self._client is None:
                self._client = APIClient()
            self._tasks_api = TasksAPI(self._client)
        return self._tasks_api

    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List tasks, narrowing server-side where the API allows it."""
        weeks = []
        if filters.week_of is not None:
            weeks.append(filters.week_of.isoformat())
        if filters.weeks is not None:
            if not filters.weeks:
                return []
            weeks.extend(week.isoformat() for week in filters.weeks)

        with translate_http_errors("list tasks"):
            result = await self.tasks_api.list_tasks(
                assignee_id=filters.assignee_id,
                weeks=weeks,
                status=filters.status,
                priority=filters.priority,
            )

        tasks = [Task(**doc) for doc in _documents(result, "tasks")]
        # Search, ordering and limit are not supported by the API
        return filter_tasks(tasks, filters)

    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID."""
        with translate_http_errors(
            f"get task {task_id}", not_found=TaskNotFoundError(task_id)
        ):
            result = await self.tasks_api.get_task(task_id)
        return Task(**result)

    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task document.

        The id is generated here so embedded comments can reference it.
        """
        task_id = str(uuid.uuid4())
        now = datetime.now(UTC).isoformat()
        comments = [
            comment.model_copy(update={"id": str(uuid.uuid4()), "task_id": task_id})
            for comment in task_data.comments
        ]

        document = task_data.model_dump(mode="json", by_alias=True)
        document.update(
            id=task_id,
            comments=[c.model_dump(mode="json", by_alias=True) for c in comments],
            createdAt=now,
            updatedAt=now,
        )

        with translate_http_errors("add task"):
            result = await self.tasks_api.create_task(document)
        logger.info("created task document %s in week %s", task_id, task_data.week_of)
        return Task(**result)

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        """Patch the fields set on ``updates``."""
        changes = updates.changed_fields()
        if not changes:
            return await self.get(task_id)

        payload = updates.model_dump(mode="json", by_alias=True, include=set(changes))
        payload["updatedAt"] = datetime.now(UTC).isoformat()

        with translate_http_errors(
            f"update task {task_id}", not_found=TaskNotFoundError(task_id)
        ):
            result = await self.tasks_api.update_task(task_id, payload)
        logger.debug("patched task document %s fields %s", task_id, sorted(changes))
        return Task(**result)

    async def write_copy_history(
        self, task_id: str, copy_history: list[TaskCopyHistory]
    ) -> Task:
        payload = {
            "copyHistory": [
                entry.model_dump(mode="json", by_alias=True) for entry in copy_history
            ],
            "updatedAt": datetime.now(UTC).isoformat(),
        }
        with translate_http_errors(
            f"update copy history of {task_id}", not_found=TaskNotFoundError(task_id)
        ):
            result = await self.tasks_api.update_task(task_id, payload)
        return Task(**result)

    async def delete(self, task_id: str) -> bool:
        """Delete a task document and its embedded comments."""
        with translate_http_errors(
            f"delete task {task_id}", not_found=TaskNotFoundError(task_id)
        ):
            await self.tasks_api.delete_task(task_id)
        logger.info("deleted task document %s", task_id)
        return True


class RestApiUserRepository(UserRepository):
    """User repository implementation using the document API."""

    def __init__(self, client: APIClient | None = None):
        self._client = client
        self._users_api: UsersAPI | None = None

    @property
    def users_api(self) -> UsersAPI:
        """Get or create UsersAPI instance."""
        if self._users_api is None:
            if self._client is None:
                self._client = APIClient()
            self._users_api = UsersAPI(self._client)
        return self._users_api

    async def list_all(self) -> list[User]:
        with translate_http_errors("list users"):
            result = await self.users_api.list_users()
        return [User(**doc) for doc in _documents(result, "users")]

    async def get(self, user_id: str) -> User:
        with translate_http_errors(
            f"get user {user_id}", not_found=UserNotFoundError(user_id)
        ):
            result = await self.users_api.get_user(user_id)
        return User(**result)
