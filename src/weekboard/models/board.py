"""Board and reporting models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from weekboard.models.base import CamelModel
from weekboard.models.task import Task, TaskStatus


class WeekStats(CamelModel):
    """Aggregate counts and hours for one user's week."""

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    blocked: int = 0
    total_estimated: float = 0
    total_actual: float = 0


class KanbanColumn(CamelModel):
    """A status column on the Kanban board.

    Attributes:
        id: Column identifier (same as the status)
        title: Display title
        status: Status every task in the column has
        tasks: Tasks in the column
        max_tasks: Optional work-in-progress limit
    """

    id: str
    title: str
    status: TaskStatus
    tasks: list[Task] = Field(default_factory=list)
    max_tasks: int | None = Field(default=None, ge=1)

    @property
    def over_limit(self) -> bool:
        return self.max_tasks is not None and len(self.tasks) > self.max_tasks


class EmailNotification(CamelModel):
    """A report handed to the notification sink."""

    id: str
    type: Literal["weekly", "daily", "urgent"] = "weekly"
    recipients: list[str]
    subject: str
    content: str
    sent_at: datetime | None = None
    status: Literal["pending", "sent", "failed"] = "pending"
