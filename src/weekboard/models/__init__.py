"""Data models for weekboard."""

from .board import EmailNotification, KanbanColumn, WeekStats
from .task import (
    TASK_PRIORITIES,
    TASK_STATUSES,
    CopySettings,
    Task,
    TaskComment,
    TaskCopyHistory,
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    apply_task_update,
)
from .user import User

__all__ = [
    "TASK_PRIORITIES",
    "TASK_STATUSES",
    "CopySettings",
    "EmailNotification",
    "KanbanColumn",
    "Task",
    "TaskComment",
    "TaskCopyHistory",
    "TaskCreate",
    "TaskFilters",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    "User",
    "WeekStats",
    "apply_task_update",
]
