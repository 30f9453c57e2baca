"""SQLite implementation of UserRepository."""

from __future__ import annotations

import logging
import sqlite3

from weekboard.adapters.sqlite.connection import get_connection
from weekboard.adapters.sqlite.utils import (
    generate_uuid,
    now_iso,
    row_to_dict,
    translate_errors,
)
from weekboard.models import User
from weekboard.repositories import UserRepository
from weekboard.utils.errors import UserNotFoundError

logger = logging.getLogger(__name__)


class SqliteUserRepository(UserRepository):
    """SQLite implementation of user repository."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    async def list_all(self) -> list[User]:
        """List all users ordered by name."""
        with translate_errors("list users"):
            rows = self.connection.execute(
                "SELECT * FROM users ORDER BY name"
            ).fetchall()
        return [User(**row_to_dict(row)) for row in rows]

    async def get(self, user_id: str) -> User:
        """Get a specific user by ID."""
        with translate_errors(f"get user {user_id}"):
            row = self.connection.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if not row:
            raise UserNotFoundError(user_id)
        return User(**row_to_dict(row))

    async def add(
        self,
        email: str,
        name: str,
        long_name: str = "",
        role: str = "",
        department: str = "",
    ) -> User:
        """Register a user in the local store.

        The local store has no identity provider, so reference data is
        seeded here.
        """
        user_id = generate_uuid()
        now = now_iso()
        with translate_errors("add user"), self.connection:
            self.connection.execute(
                """INSERT INTO users (
                    id, email, name, long_name, role, department,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (user_id, email, name, long_name, role, department, now, now),
            )
        logger.info("registered local user %s", user_id)
        return await self.get(user_id)
