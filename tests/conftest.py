"""Shared test fixtures and configuration.

Keeps every test away from the real config, data and log directories and
provides task factories plus an in-memory SQLite store.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, date, datetime
from unittest.mock import patch

import pytest

from weekboard.adapters.sqlite.connection import DatabaseConnection, configure_connection
from weekboard.adapters.sqlite.schema import ensure_schema
from weekboard.adapters.sqlite.task_repository import SqliteTaskRepository
from weekboard.adapters.sqlite.user_repository import SqliteUserRepository
from weekboard.models import Task, User

NOW = datetime(2024, 1, 8, 9, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_dirs(tmp_path):
    """Point platformdirs lookups at tmp_path and reset cached services."""
    from weekboard.services.config_service import get_config_service

    get_config_service.cache_clear()
    with (
        patch("weekboard.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")),
        patch(
            "weekboard.services.config_service.user_config_dir",
            return_value=str(tmp_path / "config"),
        ),
        patch(
            "weekboard.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ),
    ):
        yield
    get_config_service.cache_clear()
    DatabaseConnection.close_connection()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def build_task(**overrides) -> Task:
    """A valid Task with sensible defaults; keyword arguments override."""
    data = {
        "id": "task-1",
        "title": "Prepare release notes",
        "assignee_id": "user-1",
        "week_of": date(2024, 1, 8),
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return Task(**data)


def build_user(**overrides) -> User:
    data = {
        "id": "user-1",
        "email": "ana@example.com",
        "name": "ana",
        "long_name": "Ana Torres",
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return User(**data)


@pytest.fixture
def make_task():
    return build_task


@pytest.fixture
def make_user():
    return build_user


# ---------------------------------------------------------------------------
# In-memory SQLite store
# ---------------------------------------------------------------------------


@pytest.fixture
def sqlite_db():
    """Fresh in-memory database with the full schema applied."""
    conn = sqlite3.connect(":memory:")
    configure_connection(conn)
    ensure_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def task_repo(sqlite_db) -> SqliteTaskRepository:
    repo = SqliteTaskRepository()
    repo._connection = sqlite_db
    return repo


@pytest.fixture
def user_repo(sqlite_db) -> SqliteUserRepository:
    repo = SqliteUserRepository()
    repo._connection = sqlite_db
    return repo
