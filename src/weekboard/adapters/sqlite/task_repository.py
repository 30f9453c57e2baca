"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from typing import Any

from weekboard.adapters.sqlite.connection import get_connection
from weekboard.adapters.sqlite.utils import (
    from_json_column,
    generate_uuid,
    now_iso,
    row_to_dict,
    to_column,
    translate_errors,
)
from weekboard.models import (
    Task,
    TaskComment,
    TaskCopyHistory,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    apply_task_update,
)
from weekboard.repositories import TaskRepository, ensure_history_extends
from weekboard.utils.errors import TaskNotFoundError
from weekboard.utils.task_filters import by_text

logger = logging.getLogger(__name__)

# Priority order for ORDER BY, lowest first
_PRIORITY_ORDER_SQL = (
    "CASE t.priority WHEN 'low' THEN 0 WHEN 'medium' THEN 1 "
    "WHEN 'high' THEN 2 WHEN 'urgent' THEN 3 END"
)

_SORT_COLUMNS = {
    "week_of": "t.week_of",
    "created_at": "t.created_at",
    "due_date": "t.due_date",
    "priority": _PRIORITY_ORDER_SQL,
}


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository.

    Comments are stored in ``task_comments``; tags and copy history as JSON
    arrays on the task row.
    """

    def __init__(self, db_path: str | None = None):
        """Initialize SQLite task repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List all tasks with filtering."""
        query = "SELECT t.* FROM tasks t WHERE 1 = 1"
        params: list[Any] = []

        if filters.assignee_id:
            query += " AND t.assignee_id = ?"
            params.append(filters.assignee_id)

        if filters.week_of is not None:
            query += " AND t.week_of = ?"
            params.append(filters.week_of.isoformat())

        if filters.weeks is not None:
            if not filters.weeks:
                return []
            placeholders = ", ".join("?" for _ in filters.weeks)
            query += f" AND t.week_of IN ({placeholders})"
            params.extend(week.isoformat() for week in filters.weeks)

        if filters.status:
            query += " AND t.status = ?"
            params.append(filters.status)

        if filters.priority:
            query += " AND t.priority = ?"
            params.append(filters.priority)

        # Sorting
        if filters.sort:
            sort_field, *sort_dir = filters.sort.split(":")
            direction = sort_dir[0].upper() if sort_dir else "ASC"
            column = _SORT_COLUMNS[sort_field]
            if sort_field == "due_date":
                # Undated tasks last
                query += f" ORDER BY t.due_date IS NULL, {column} {direction}"
            else:
                query += f" ORDER BY {column} {direction}"
        else:
            query += " ORDER BY t.week_of DESC, t.created_at DESC"

        # Text search runs in Python, so the limit must follow it
        if filters.limit is not None and not filters.search:
            query += " LIMIT ?"
            params.append(filters.limit)

        with translate_errors("list tasks"):
            rows = self.connection.execute(query, params).fetchall()
            tasks = [self._row_to_task(row) for row in rows]

        if filters.search:
            matches = by_text(filters.search)
            tasks = [task for task in tasks if matches(task)]
            if filters.limit is not None:
                tasks = tasks[: filters.limit]
        return tasks

    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID."""
        with translate_errors(f"get task {task_id}"):
            row = self.connection.execute(
                "SELECT * FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
            if not row:
                raise TaskNotFoundError(task_id)
            return self._row_to_task(row)

    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task."""
        task_id = generate_uuid()
        with translate_errors("add task"), self.connection:
            self._insert_task(task_id, task_data)
        logger.info("created task %s in week %s", task_id, task_data.week_of)
        return await self.get(task_id)

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        """Write the fields set on ``updates`` to an existing task."""
        task = await self.get(task_id)
        changes = updates.changed_fields()
        if not changes:
            return task

        updated = apply_task_update(task, updates).model_copy(
            update={"updated_at": datetime.now(UTC)}
        )
        assignments = [f"{field} = ?" for field in changes]
        params = [to_column(value) for value in changes.values()]
        params.extend([updated.updated_at.isoformat(), task_id])

        with translate_errors(f"update task {task_id}"), self.connection:
            self.connection.execute(
                f"UPDATE tasks SET {', '.join(assignments)}, updated_at = ? WHERE id = ?",
                params,
            )
        logger.debug("updated task %s fields %s", task_id, sorted(changes))
        return updated

    async def delete(self, task_id: str) -> bool:
        """Hard-delete a task; comments go with it via ON DELETE CASCADE."""
        with translate_errors(f"delete task {task_id}"), self.connection:
            cursor = self.connection.execute(
                "DELETE FROM tasks WHERE id = ?", (task_id,)
            )
            if cursor.rowcount == 0:
                raise TaskNotFoundError(task_id)
        logger.info("deleted task %s", task_id)
        return True

    async def write_copy_history(
        self, task_id: str, copy_history: list[TaskCopyHistory]
    ) -> Task:
        with translate_errors(f"update copy history of {task_id}"), self.connection:
            cursor = self.connection.execute(
                "UPDATE tasks SET copy_history = ?, updated_at = ? WHERE id = ?",
                (to_column(copy_history), now_iso(), task_id),
            )
            if cursor.rowcount == 0:
                raise TaskNotFoundError(task_id)
        return await self.get(task_id)

    async def add_copy(self, task_data: TaskCreate, source_id: str) -> Task:
        """Insert the copy and extend the source history in one transaction."""
        task_id = generate_uuid()
        with translate_errors(f"copy task {source_id}"), self.connection:
            row = self.connection.execute(
                "SELECT copy_history FROM tasks WHERE id = ?", (source_id,)
            ).fetchone()
            if not row:
                raise TaskNotFoundError(source_id)
            stored = [
                TaskCopyHistory(**entry)
                for entry in from_json_column(row["copy_history"])
            ]
            ensure_history_extends(source_id, stored, task_data.copy_history)

            self._insert_task(task_id, task_data)
            self.connection.execute(
                "UPDATE tasks SET copy_history = ?, updated_at = ? WHERE id = ?",
                (to_column(task_data.copy_history), now_iso(), source_id),
            )
        logger.info("copied task %s to %s as %s", source_id, task_data.week_of, task_id)
        return await self.get(task_id)

    def _insert_task(self, task_id: str, task_data: TaskCreate) -> None:
        now = now_iso()
        data = task_data.model_dump(mode="json", exclude={"comments"})
        data.update(id=task_id, created_at=now, updated_at=now)

        columns = list(data)
        placeholders = ", ".join("?" for _ in columns)
        self.connection.execute(
            f"INSERT INTO tasks ({', '.join(columns)}) VALUES ({placeholders})",
            [to_column(data[column]) for column in columns],
        )

        # Comments get fresh ids so a copy never collides with its source
        for comment in task_data.comments:
            self.connection.execute(
                """INSERT INTO task_comments (id, task_id, user_id, content, created_at)
                VALUES (?, ?, ?, ?, ?)""",
                (
                    generate_uuid(),
                    task_id,
                    comment.user_id,
                    comment.content,
                    comment.created_at.isoformat(),
                ),
            )

    def _get_task_comments(self, task_id: str) -> list[TaskComment]:
        rows = self.connection.execute(
            """SELECT * FROM task_comments WHERE task_id = ?
            ORDER BY created_at ASC, rowid ASC""",
            (task_id,),
        ).fetchall()
        return [TaskComment(**row_to_dict(row)) for row in rows]

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        task_dict = row_to_dict(row)
        task_dict["tags"] = from_json_column(task_dict.get("tags"))
        task_dict["copy_history"] = from_json_column(task_dict.get("copy_history"))
        task_dict["comments"] = self._get_task_comments(task_dict["id"])
        return Task(**task_dict)
