"""SQLite adapter module - Local relational store implementation."""

from weekboard.adapters.sqlite.task_repository import SqliteTaskRepository
from weekboard.adapters.sqlite.user_repository import SqliteUserRepository

__all__ = [
    "SqliteTaskRepository",
    "SqliteUserRepository",
]
