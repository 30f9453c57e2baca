"""Task data models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, get_args

from pydantic import ConfigDict, Field, field_validator

from weekboard.models.base import CamelModel

TaskStatus = Literal["todo", "in-progress", "completed", "blocked"]
TaskPriority = Literal["low", "medium", "high", "urgent"]
CopyHistoryStatus = Literal["active", "completed", "archived"]

TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)
TASK_PRIORITIES: tuple[str, ...] = get_args(TaskPriority)

# Fields a TaskUpdate may explicitly clear by passing None
_NULLABLE_UPDATE_FIELDS = frozenset({"due_date", "ticket_number"})


def _dedupe_tags(tags: list[str]) -> list[str]:
    """Strip blanks and collapse duplicates, keeping first occurrence."""
    return list(dict.fromkeys(t.strip() for t in tags if t and t.strip()))


class TaskComment(CamelModel):
    """Comment owned by a task.

    Attributes:
        id: Unique identifier for the comment
        task_id: Owning task
        user_id: Author
        content: Comment text
        created_at: Creation timestamp
    """

    id: str
    task_id: str = ""
    user_id: str
    content: str
    created_at: datetime

    def for_task(self, task_id: str) -> TaskComment:
        """Return a copy of this comment attached to ``task_id``."""
        return self.model_copy(update={"task_id": task_id})


class TaskCopyHistory(CamelModel):
    """One copy operation recorded in a task's lineage ledger.

    Entries are immutable once appended.

    Attributes:
        id: Unique identifier for the entry
        original_task_id: Root ancestor of the copied task
        copied_from_week: Week key of the source task at copy time
        copied_to_week: Week key the copy was placed in
        copy_reason: Free-text reason given by the user
        copied_by: User who performed the copy
        copied_at: When the copy happened (UTC)
        status: Ledger status of the entry
    """

    model_config = ConfigDict(frozen=True)

    id: str
    original_task_id: str
    copied_from_week: date
    copied_to_week: date
    copy_reason: str = ""
    copied_by: str = ""
    copied_at: datetime
    status: CopyHistoryStatus = "active"


class Task(CamelModel):
    """Task model representing a stored task.

    Attributes:
        id: Unique identifier, assigned by the store
        title: Short task title
        description: Optional longer description
        status: Kanban column the task sits in
        priority: Priority level
        assignee_id: User the task belongs to
        week_of: Monday key of the week bucket
        due_date: Absolute due date, independent of week_of
        estimated_hours: Planned effort
        actual_hours: Effort logged so far
        progress: Completion percentage (0-100)
        ticket_number: Optional service desk ticket
        tags: Short labels, order irrelevant
        comments: Ordered comments owned by the task
        original_task_id: Root ancestor when this task is a copy
        copied_from_week: Week this task was copied from
        copied_to_week: Week this task was copied to
        copy_reason: Reason given for the copy that produced this task
        copied_by: User who produced this task by copying
        copy_history: Append-only ledger of copy operations
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    assignee_id: str = Field(min_length=1)
    week_of: date
    due_date: date | None = None
    estimated_hours: float = Field(default=0, ge=0)
    actual_hours: float = Field(default=0, ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    ticket_number: str | None = None
    tags: list[str] = Field(default_factory=list)
    comments: list[TaskComment] = Field(default_factory=list)
    original_task_id: str | None = None
    copied_from_week: date | None = None
    copied_to_week: date | None = None
    copy_reason: str | None = None
    copied_by: str | None = None
    copy_history: list[TaskCopyHistory] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: list[str]) -> list[str]:
        return _dedupe_tags(tags)


class TaskCreate(CamelModel):
    """Model for creating a new task.

    Carries every Task field except the store-assigned id and timestamps.
    Comments are re-attached to the new task id by the store adapter.
    """

    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    assignee_id: str = Field(min_length=1)
    week_of: date
    due_date: date | None = None
    estimated_hours: float = Field(default=0, ge=0)
    actual_hours: float = Field(default=0, ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    ticket_number: str | None = None
    tags: list[str] = Field(default_factory=list)
    comments: list[TaskComment] = Field(default_factory=list)
    original_task_id: str | None = None
    copied_from_week: date | None = None
    copied_to_week: date | None = None
    copy_reason: str | None = None
    copied_by: str | None = None
    copy_history: list[TaskCopyHistory] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: list[str]) -> list[str]:
        return _dedupe_tags(tags)


class TaskUpdate(CamelModel):
    """Typed partial update for an existing task.

    All fields are optional - only fields the caller explicitly set are
    applied. None is ignored except for due_date and ticket_number, where it
    clears the value. Week, assignee and lineage fields, copy history
    included, are not editable here.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    progress: int | None = Field(default=None, ge=0, le=100)
    ticket_number: str | None = None
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: list[str] | None) -> list[str] | None:
        return None if tags is None else _dedupe_tags(tags)

    def changed_fields(self) -> dict[str, Any]:
        """Return the field values this update applies, keyed by field name."""
        changes: dict[str, Any] = {}
        for name in sorted(self.model_fields_set):
            value = getattr(self, name)
            if value is None and name not in _NULLABLE_UPDATE_FIELDS:
                continue
            changes[name] = value
        return changes


def apply_task_update(task: Task, updates: TaskUpdate) -> Task:
    """Merge ``updates`` into ``task`` field by field, returning a new Task."""
    return task.model_copy(update=updates.changed_fields())


class TaskFilters(CamelModel):
    """Filters for querying tasks.

    Attributes:
        assignee_id: Only tasks owned by this user
        week_of: Only tasks in this week bucket
        weeks: Only tasks in any of these week buckets
        status: Filter by status
        priority: Filter by priority
        search: Case-insensitive text over title, description, ticket number
        sort: Sort field and direction (e.g. "due_date:asc")
        limit: Maximum number of results
    """

    assignee_id: str | None = None
    week_of: date | None = None
    weeks: list[date] | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    sort: str | None = Field(
        default=None,
        pattern=r"^(week_of|created_at|due_date|priority)(:(asc|desc))?$",
    )
    limit: int | None = Field(default=None, ge=1)


class CopySettings(CamelModel):
    """Options controlling what a copy carries over from its source.

    include_progress is accepted for compatibility with stored settings but
    is not consulted: only reset_status decides the copied progress.
    """

    include_comments: bool = True
    include_progress: bool = False
    include_actual_hours: bool = False
    reset_status: bool = True
