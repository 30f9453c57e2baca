"""Users API endpoints."""

from __future__ import annotations

from weekboard.services.api.client import APIClient


class UsersAPI:
    """Users API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_users(self) -> dict | list:
        """List all users."""
        response = await self.client.get("/v1/users")
        return response.json()

    async def get_user(self, user_id: str) -> dict:
        """Get a specific user by ID."""
        response = await self.client.get(f"/v1/users/{user_id}")
        return response.json()
