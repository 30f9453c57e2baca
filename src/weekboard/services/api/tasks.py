"""Tasks API endpoints."""

from __future__ import annotations

from typing import Any

from weekboard.services.api.client import APIClient


class TasksAPI:
    """Tasks API client.

    Payloads are camelCase task documents with comments embedded.
    """

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(
        self,
        *,
        assignee_id: str | None = None,
        weeks: list[str] | None = None,
        status: str | None = None,
        priority: str | None = None,
    ) -> dict | list:
        """List task documents matching the given query."""
        # weekOf repeats once per requested week
        params: list[tuple[str, Any]] = []

        if assignee_id:
            params.append(("assigneeId", assignee_id))
        for week in weeks or []:
            params.append(("weekOf", week))
        if status:
            params.append(("status", status))
        if priority:
            params.append(("priority", priority))

        response = await self.client.get("/v1/tasks", params=params)
        return response.json()

    async def get_task(self, task_id: str) -> dict:
        """Get a specific task by ID."""
        response = await self.client.get(f"/v1/tasks/{task_id}")
        return response.json()

    async def create_task(self, document: dict[str, Any]) -> dict:
        """Create a task document."""
        response = await self.client.post("/v1/tasks", json=document)
        return response.json()

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> dict:
        """Patch the given fields of a task document."""
        response = await self.client.patch(f"/v1/tasks/{task_id}", json=changes)
        return response.json()

    async def delete_task(self, task_id: str) -> None:
        """Delete a task document."""
        await self.client.delete(f"/v1/tasks/{task_id}")
