"""Database connection management for the local SQLite store.

This module provides a singleton connection manager for the local SQLite database,
ensuring proper connection lifecycle, WAL mode, and foreign key enforcement.
"""

from __future__ import annotations

import atexit
import logging
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from weekboard.adapters.sqlite.schema import ensure_schema

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Singleton connection manager for the local store.

    Provides:
    - Single connection per process (connection reuse)
    - WAL mode and foreign key enforcement
    - Automatic directory creation and schema upgrade
    - Owner-only file permissions
    - Cleanup on exit
    """

    _instance: DatabaseConnection | None = None
    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None

    def __new__(cls) -> DatabaseConnection:
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create database connection.

        Args:
            db_path: Path to database file. If None, uses default location.

        Returns:
            sqlite3.Connection configured for weekboard
        """
        instance = cls()

        if db_path is None:
            db_path = Path(user_data_dir("weekboard")) / "weekboard.db"
        else:
            db_path = Path(db_path)

        if instance._connection is not None and instance._db_path == db_path:
            return instance._connection

        if instance._connection is not None:
            instance._connection.close()

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = sqlite3.connect(str(db_path), timeout=30.0)
        configure_connection(connection)

        if is_new_database:
            os.chmod(db_path, 0o600)
            logger.info("created local store at %s", db_path)

        ensure_schema(connection)

        instance._connection = connection
        instance._db_path = db_path

        atexit.register(cls.close_connection)

        return connection

    @classmethod
    def close_connection(cls) -> None:
        """Close the open connection, if any."""
        instance = cls._instance
        if instance is not None and instance._connection is not None:
            instance._connection.close()
            instance._connection = None
            instance._db_path = None


def configure_connection(connection: sqlite3.Connection) -> None:
    """Apply row factory and pragmas weekboard relies on."""
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    connection.execute("PRAGMA journal_mode = WAL")


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Get the process-wide connection for ``db_path``."""
    return DatabaseConnection.get_connection(db_path)
