"""Tests for the document API HTTP client and endpoint wrappers."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from weekboard.services.api.client import APIClient
from weekboard.services.api.tasks import TasksAPI
from weekboard.services.api.users import UsersAPI
from weekboard.services.config_service import ConfigService

BASE_URL = "https://weekboard.test/api"


@pytest.fixture
def config_service(tmp_path):
    service = ConfigService(config_dir=tmp_path / "cfg", data_dir=tmp_path / "data")
    service.use_context("cloud")
    return service


def make_client(config_service, handler) -> tuple[APIClient, list[httpx.Request]]:
    """APIClient whose transport records requests and answers with ``handler``."""
    requests: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = APIClient(base_url=BASE_URL, config_service=config_service)
    client._client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(record)
    )
    return client, requests


class TestAPIClient:
    def test_defaults_to_context_source(self, config_service):
        client = APIClient(config_service=config_service)
        assert client.base_url == config_service.get_current_context().source
        assert client.timeout == 30

    @pytest.mark.asyncio
    async def test_bearer_token_from_context_credentials(self, config_service):
        config_service.save_credentials("tok-1", context_name="cloud")
        client, requests = make_client(config_service, lambda r: httpx.Response(200, json={}))

        async with client:
            await client.get("/v1/users")

        assert requests[0].headers["Authorization"] == "Bearer tok-1"

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self, config_service):
        client, requests = make_client(config_service, lambda r: httpx.Response(200, json={}))
        await client.get("v1/users")

        assert "Authorization" not in requests[0].headers
        assert requests[0].url.path == "/api/v1/users"

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, config_service):
        client, requests = make_client(config_service, lambda r: httpx.Response(404))

        with pytest.raises(httpx.HTTPStatusError):
            await client.get("/v1/tasks/missing")
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_server_errors_are_retried(self, config_service):
        responses = iter([httpx.Response(503), httpx.Response(200, json={"ok": True})])
        client, requests = make_client(config_service, lambda r: next(responses))

        with patch("weekboard.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
            response = await client.get("/v1/tasks")

        assert response.json() == {"ok": True}
        assert len(requests) == 2
        sleep.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, config_service):
        client, requests = make_client(config_service, lambda r: httpx.Response(500))

        with patch("weekboard.services.api.client.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(httpx.HTTPStatusError):
                await client.request("GET", "/v1/tasks", retry=2)
        assert len(requests) == 3

    @pytest.mark.asyncio
    async def test_network_errors_are_retried(self, config_service):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client, requests = make_client(config_service, handler)

        with patch("weekboard.services.api.client.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(httpx.ConnectError):
                await client.get("/v1/tasks")
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_close_releases_http_client(self, config_service):
        client, _ = make_client(config_service, lambda r: httpx.Response(200))
        await client.close()
        assert client._client is None


class TestTasksAPI:
    @pytest.mark.asyncio
    async def test_list_tasks_query(self, config_service):
        client, requests = make_client(config_service, lambda r: httpx.Response(200, json=[]))

        await TasksAPI(client).list_tasks(
            assignee_id="user-1",
            weeks=["2024-01-08", "2024-01-15"],
            status="todo",
        )

        params = requests[0].url.params
        assert params["assigneeId"] == "user-1"
        assert params.get_list("weekOf") == ["2024-01-08", "2024-01-15"]
        assert params["status"] == "todo"
        assert "priority" not in params

    @pytest.mark.asyncio
    async def test_create_and_patch_send_json(self, config_service):
        client, requests = make_client(
            config_service, lambda r: httpx.Response(200, json={"id": "t1"})
        )
        api = TasksAPI(client)

        await api.create_task({"title": "New"})
        await api.update_task("t1", {"status": "completed"})
        await api.delete_task("t1")

        assert [r.method for r in requests] == ["POST", "PATCH", "DELETE"]
        assert json.loads(requests[0].content) == {"title": "New"}
        assert requests[1].url.path.endswith("/v1/tasks/t1")
        assert json.loads(requests[1].content) == {"status": "completed"}


class TestUsersAPI:
    @pytest.mark.asyncio
    async def test_get_user(self, config_service):
        client, requests = make_client(
            config_service, lambda r: httpx.Response(200, json={"id": "u1"})
        )
        assert await UsersAPI(client).get_user("u1") == {"id": "u1"}
        assert requests[0].url.path.endswith("/v1/users/u1")
