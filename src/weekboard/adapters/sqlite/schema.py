"""Database schema for the local relational store.

Column names follow snake_case. Tags and copy history are JSON arrays in
TEXT columns; comments live in their own table keyed by task.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# Bump when adding a statement to MIGRATIONS
SCHEMA_VERSION = 1

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    long_name TEXT NOT NULL DEFAULT '',
    avatar TEXT NOT NULL DEFAULT '',
    role TEXT NOT NULL DEFAULT '',
    department TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""

CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'todo'
        CHECK (status IN ('todo', 'in-progress', 'completed', 'blocked')),
    priority TEXT NOT NULL DEFAULT 'medium'
        CHECK (priority IN ('low', 'medium', 'high', 'urgent')),
    assignee_id TEXT NOT NULL,
    week_of DATE NOT NULL,
    due_date DATE,
    estimated_hours REAL NOT NULL DEFAULT 0 CHECK (estimated_hours >= 0),
    actual_hours REAL NOT NULL DEFAULT 0 CHECK (actual_hours >= 0),
    progress INTEGER NOT NULL DEFAULT 0 CHECK (progress BETWEEN 0 AND 100),
    ticket_number TEXT,
    tags TEXT NOT NULL DEFAULT '[]',
    original_task_id TEXT,
    copied_from_week DATE,
    copied_to_week DATE,
    copy_reason TEXT,
    copied_by TEXT,
    copy_history TEXT NOT NULL DEFAULT '[]',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""

CREATE_TASK_COMMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS task_comments (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at DATETIME NOT NULL,
    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE
)
"""

ALL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_assignee_week ON tasks(assignee_id, week_of)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(assignee_id, priority)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_original ON tasks(original_task_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_comments_task ON task_comments(task_id)",
]

# One entry per schema version, applied in order
MIGRATIONS: list[list[str]] = [
    [CREATE_USERS_TABLE, CREATE_TASKS_TABLE, CREATE_TASK_COMMENTS_TABLE, *ALL_INDEXES],
]


def get_schema_version(connection: sqlite3.Connection) -> int:
    return connection.execute("PRAGMA user_version").fetchone()[0]


def ensure_schema(connection: sqlite3.Connection) -> int:
    """Bring the database up to SCHEMA_VERSION.

    Forward-only. Each pending version runs in its own transaction.

    Returns:
        Number of versions applied
    """
    current = get_schema_version(connection)
    applied = 0
    for version, statements in enumerate(MIGRATIONS, start=1):
        if version <= current:
            continue
        try:
            for sql in statements:
                connection.execute(sql)
            # PRAGMA does not accept bound parameters
            connection.execute(f"PRAGMA user_version = {version:d}")
            connection.commit()
        except sqlite3.Error as e:
            connection.rollback()
            raise RuntimeError(f"Schema migration {version} failed: {e}") from e
        logger.info("applied schema version %d", version)
        applied += 1
    return applied
