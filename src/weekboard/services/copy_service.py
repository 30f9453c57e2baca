"""Building copies of tasks across weeks.

Pure record construction; persisting the copy and the source's history is
``TaskService.copy_task``'s job.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from weekboard.models import CopySettings, Task, TaskCopyHistory, TaskCreate
from weekboard.utils.errors import InvalidArgumentError

# Fields carried from source to copy unchanged
_VERBATIM_FIELDS = (
    "title",
    "description",
    "priority",
    "assignee_id",
    "due_date",
    "estimated_hours",
    "ticket_number",
    "tags",
)


def build_copy_history_entry(
    source: Task,
    target_week: date,
    reason: str,
    copied_by: str,
    *,
    now: datetime | None = None,
) -> TaskCopyHistory:
    """Ledger entry describing a copy of ``source`` into ``target_week``."""
    return TaskCopyHistory(
        id=str(uuid.uuid4()),
        original_task_id=source.original_task_id or source.id,
        copied_from_week=source.week_of,
        copied_to_week=target_week,
        copy_reason=reason,
        copied_by=copied_by,
        copied_at=now or datetime.now(UTC),
        status="active",
    )


def build_task_copy(
    source: Task,
    target_week: date | None,
    settings: CopySettings,
    reason: str = "",
    copied_by: str = "",
    *,
    now: datetime | None = None,
) -> TaskCreate:
    """Build the record for a copy of ``source`` placed in ``target_week``.

    Status and progress reset together when ``settings.reset_status`` is set;
    ``settings.include_progress`` has no effect. The returned copy_history is
    the source history plus one new entry, which is also what the source's
    history must be updated to.

    Raises:
        InvalidArgumentError: If no target week is given
    """
    if not target_week:
        raise InvalidArgumentError("A target week is required to copy a task")

    entry = build_copy_history_entry(source, target_week, reason, copied_by, now=now)

    fields = {name: getattr(source, name) for name in _VERBATIM_FIELDS}
    return TaskCreate(
        **fields,
        week_of=target_week,
        status="todo" if settings.reset_status else source.status,
        progress=0 if settings.reset_status else source.progress,
        actual_hours=source.actual_hours if settings.include_actual_hours else 0,
        comments=list(source.comments) if settings.include_comments else [],
        original_task_id=entry.original_task_id,
        copied_from_week=source.week_of,
        copied_to_week=target_week,
        copy_reason=reason,
        copied_by=copied_by,
        copy_history=[*source.copy_history, entry],
    )
