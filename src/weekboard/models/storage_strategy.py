"""
Strategy Pattern: Storage Strategy Container

The StorageStrategyContext holds the strategy chosen at startup and hands
its repositories to services, so services never branch on the backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from weekboard.repositories import TaskRepository, UserRepository

if TYPE_CHECKING:
    from weekboard.services.api.client import APIClient


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy encapsulates all repository implementations for a given
    storage backend (either the local relational store or the remote
    document API).
    """

    @abstractmethod
    def get_task_repository(self) -> TaskRepository:
        """Get task repository implementation for this strategy."""

    @abstractmethod
    def get_user_repository(self) -> UserRepository:
        """Get user repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""

    async def close(self) -> None:
        """Release resources held by the repositories; they stay usable."""


class LocalStorageStrategy(StorageStrategy):
    """
    Local SQLite storage strategy.

    Instantiated once at startup if the active context is 'local'.
    """

    def __init__(self, db_path: str):
        """
        Initialize local strategy.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Import here to avoid circular dependencies
        from weekboard.adapters.sqlite import (
            SqliteTaskRepository,
            SqliteUserRepository,
        )

        self._task_repo = SqliteTaskRepository(db_path=db_path)
        self._user_repo = SqliteUserRepository(db_path=db_path)

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_user_repository(self) -> UserRepository:
        return self._user_repo

    @property
    def storage_type(self) -> str:
        return "local"


class RemoteStorageStrategy(StorageStrategy):
    """
    Remote document API storage strategy.

    Both repositories share one HTTP client, closed by ``close``.
    """

    def __init__(self, client: APIClient | None = None):
        from weekboard.adapters.rest_api import (
            RestApiTaskRepository,
            RestApiUserRepository,
        )
        from weekboard.services.api.client import APIClient

        self.client = client if client is not None else APIClient()
        self._task_repo = RestApiTaskRepository(self.client)
        self._user_repo = RestApiUserRepository(self.client)

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_user_repository(self) -> UserRepository:
        return self._user_repo

    @property
    def storage_type(self) -> str:
        return "remote"

    async def close(self) -> None:
        await self.client.close()


class StorageStrategyContext:
    """
    Strategy context that provides access to all repositories.

    Usage:
        strategy = LocalStorageStrategy(db_path="/path/to/db")
        context = StorageStrategyContext(strategy)

        task_repo = context.task_repository
    """

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @property
    def task_repository(self) -> TaskRepository:
        """Get task repository from current strategy."""
        return self._strategy.get_task_repository()

    @property
    def user_repository(self) -> UserRepository:
        """Get user repository from current strategy."""
        return self._strategy.get_user_repository()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    async def close(self) -> None:
        await self._strategy.close()

    @property
    def strategy(self) -> StorageStrategy:
        return self._strategy
