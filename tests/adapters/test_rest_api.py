"""Tests for the document API repositories.

TasksAPI / UsersAPI are mocked; these tests cover document mapping and
error translation.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from weekboard.adapters.rest_api import (
    RestApiTaskRepository,
    RestApiUserRepository,
    translate_http_errors,
)
from weekboard.models import CopySettings, TaskComment, TaskCreate, TaskFilters, TaskUpdate
from weekboard.services.copy_service import build_task_copy
from weekboard.utils.errors import (
    PartialCopyError,
    StoreError,
    TaskNotFoundError,
    UserNotFoundError,
)

STAMP = "2024-01-08T09:00:00+00:00"


def task_document(**overrides) -> dict:
    document = {
        "id": "t1",
        "title": "Prepare release notes",
        "assigneeId": "user-1",
        "weekOf": "2024-01-08",
        "status": "todo",
        "priority": "medium",
        "createdAt": STAMP,
        "updatedAt": STAMP,
    }
    document.update(overrides)
    return document


def http_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://weekboard.test/v1/tasks/t1")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


@pytest.fixture
def tasks_api():
    api = MagicMock()
    for name in ("list_tasks", "get_task", "create_task", "update_task", "delete_task"):
        setattr(api, name, AsyncMock())
    return api


@pytest.fixture
def repo(tasks_api):
    repository = RestApiTaskRepository(client=MagicMock())
    repository._tasks_api = tasks_api
    return repository


class TestTranslateHttpErrors:
    def test_404_becomes_not_found(self):
        with pytest.raises(TaskNotFoundError):
            with translate_http_errors("get task", not_found=TaskNotFoundError("t1")):
                raise http_error(404)

    def test_404_without_mapping_is_store_error(self):
        with pytest.raises(StoreError, match="HTTP 404"):
            with translate_http_errors("list tasks"):
                raise http_error(404)

    def test_network_error_is_store_error(self):
        with pytest.raises(StoreError, match="add task failed"):
            with translate_http_errors("add task"):
                raise httpx.ConnectError("refused")


class TestListAll:
    @pytest.mark.asyncio
    async def test_sends_server_side_filters(self, repo, tasks_api):
        tasks_api.list_tasks.return_value = {"tasks": [task_document()]}

        tasks = await repo.list_all(
            TaskFilters(assignee_id="user-1", week_of=date(2024, 1, 8), status="todo")
        )

        assert [t.id for t in tasks] == ["t1"]
        tasks_api.list_tasks.assert_awaited_once_with(
            assignee_id="user-1", weeks=["2024-01-08"], status="todo", priority=None
        )

    @pytest.mark.asyncio
    async def test_search_sort_and_limit_applied_locally(self, repo, tasks_api):
        tasks_api.list_tasks.return_value = [
            task_document(id="a", title="Deploy API", priority="low"),
            task_document(id="b", title="Fix login", priority="urgent"),
            task_document(id="c", title="API docs", priority="high"),
        ]

        tasks = await repo.list_all(TaskFilters(search="api", sort="priority:desc", limit=1))

        assert [t.id for t in tasks] == ["c"]

    @pytest.mark.asyncio
    async def test_empty_weeks_skips_request(self, repo, tasks_api):
        assert await repo.list_all(TaskFilters(weeks=[])) == []
        tasks_api.list_tasks.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_store_error(self, repo, tasks_api):
        tasks_api.list_tasks.side_effect = http_error(500)
        with pytest.raises(StoreError):
            await repo.list_all(TaskFilters())


class TestWrites:
    @pytest.mark.asyncio
    async def test_add_sends_camel_case_document(self, repo, tasks_api):
        tasks_api.create_task.side_effect = lambda document: document
        source_comment = TaskComment(
            id="c-old", task_id="src", user_id="user-1", content="hi", created_at=STAMP
        )

        task = await repo.add(
            TaskCreate(
                title="New",
                assignee_id="user-1",
                week_of=date(2024, 1, 8),
                due_date=date(2024, 1, 10),
                comments=[source_comment],
            )
        )

        document = tasks_api.create_task.call_args.args[0]
        assert document["assigneeId"] == "user-1"
        assert document["weekOf"] == "2024-01-08"
        assert document["dueDate"] == "2024-01-10"
        assert "createdAt" in document and "updatedAt" in document
        assert document["comments"][0]["taskId"] == document["id"]
        assert document["comments"][0]["id"] != "c-old"
        assert task.id == document["id"]

    @pytest.mark.asyncio
    async def test_update_patches_only_changed_fields(self, repo, tasks_api):
        tasks_api.update_task.return_value = task_document(status="completed")

        task = await repo.update("t1", TaskUpdate(status="completed", due_date=None))

        task_id, payload = tasks_api.update_task.call_args.args
        assert task_id == "t1"
        assert set(payload) == {"status", "dueDate", "updatedAt"}
        assert payload["dueDate"] is None
        assert task.status == "completed"

    @pytest.mark.asyncio
    async def test_update_missing_task(self, repo, tasks_api):
        tasks_api.update_task.side_effect = http_error(404)
        with pytest.raises(TaskNotFoundError):
            await repo.update("t1", TaskUpdate(progress=10))

    @pytest.mark.asyncio
    async def test_empty_update_reads_task(self, repo, tasks_api):
        tasks_api.get_task.return_value = task_document()
        await repo.update("t1", TaskUpdate())
        tasks_api.update_task.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete(self, repo, tasks_api):
        assert await repo.delete("t1") is True
        tasks_api.delete_task.assert_awaited_once_with("t1")

        tasks_api.delete_task.side_effect = http_error(404)
        with pytest.raises(TaskNotFoundError):
            await repo.delete("t1")


class TestAddCopy:
    @pytest.mark.asyncio
    async def test_patches_source_history(self, repo, tasks_api, make_task):
        source = make_task(id="t1")
        tasks_api.create_task.side_effect = lambda document: document
        tasks_api.get_task.return_value = task_document()
        tasks_api.update_task.return_value = task_document()
        task_data = build_task_copy(source, date(2024, 1, 15), CopySettings())

        copy = await repo.add_copy(task_data, "t1")

        task_id, payload = tasks_api.update_task.call_args.args
        assert task_id == "t1"
        assert payload["copyHistory"][0]["copiedToWeek"] == "2024-01-15"
        assert copy.copied_from_week == date(2024, 1, 8)

    @pytest.mark.asyncio
    async def test_failed_source_patch_is_partial_copy(self, repo, tasks_api, make_task):
        tasks_api.create_task.side_effect = lambda document: document
        tasks_api.get_task.return_value = task_document()
        tasks_api.update_task.side_effect = http_error(503)
        task_data = build_task_copy(make_task(id="t1"), date(2024, 1, 15), CopySettings())

        with pytest.raises(PartialCopyError) as exc_info:
            await repo.add_copy(task_data, "t1")

        assert exc_info.value.created_task.week_of == date(2024, 1, 15)
        assert exc_info.value.source_id == "t1"

    @pytest.mark.asyncio
    async def test_stale_source_history_is_not_overwritten(self, repo, tasks_api, make_task):
        entry = {
            "id": "h1",
            "originalTaskId": "t0",
            "copiedFromWeek": "2024-01-01",
            "copiedToWeek": "2024-01-08",
            "copiedAt": STAMP,
        }
        tasks_api.get_task.return_value = task_document(copyHistory=[entry])
        tasks_api.create_task.side_effect = lambda document: document
        # built from a source that has not seen the stored entry
        task_data = build_task_copy(make_task(id="t1"), date(2024, 1, 15), CopySettings())

        with pytest.raises(PartialCopyError, match="append-only"):
            await repo.add_copy(task_data, "t1")

        tasks_api.update_task.assert_not_called()


class TestRestApiUserRepository:
    @pytest.fixture
    def users_api(self):
        api = MagicMock()
        api.list_users = AsyncMock()
        api.get_user = AsyncMock()
        return api

    @pytest.fixture
    def user_repo(self, users_api):
        repository = RestApiUserRepository(client=MagicMock())
        repository._users_api = users_api
        return repository

    @pytest.mark.asyncio
    async def test_list_users(self, user_repo, users_api):
        users_api.list_users.return_value = {
            "users": [
                {
                    "id": "u1",
                    "email": "ana@example.com",
                    "name": "ana",
                    "longName": "Ana Torres",
                    "createdAt": STAMP,
                    "updatedAt": STAMP,
                }
            ]
        }
        users = await user_repo.list_all()
        assert users[0].display_name == "Ana Torres"

    @pytest.mark.asyncio
    async def test_missing_user(self, user_repo, users_api):
        users_api.get_user.side_effect = http_error(404)
        with pytest.raises(UserNotFoundError):
            await user_repo.get("u9")
