"""Weekly report notifications.

The service renders a user's week as an HTML report and hands it to a
NotificationSink. Delivery is the sink's business; the shipped sink only
writes the message to the log.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, date, datetime
from html import escape

from weekboard.models import EmailNotification, Task, User
from weekboard.services.board_service import compute_week_stats
from weekboard.utils.weeks import WeekRange, week_range

logger = logging.getLogger(__name__)

_SECTIONS = (
    ("completed", "Completed tasks"),
    ("in-progress", "Tasks in progress"),
    ("todo", "Pending tasks"),
)

_STYLE = """
body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
.header { background: #3B82F6; color: white; padding: 20px; text-align: center; }
.summary { background: #f8f9fa; padding: 15px; border-radius: 8px; }
.task-item { border: 1px solid #e9ecef; padding: 15px; margin: 10px 0; }
.status-completed { border-left: 4px solid #10B981; }
.status-in-progress { border-left: 4px solid #F59E0B; }
.status-todo { border-left: 4px solid #EF4444; }
"""


class NotificationSink(ABC):
    """Destination for outgoing notifications."""

    @abstractmethod
    async def send(self, notification: EmailNotification) -> None:
        """Deliver ``notification``; raise on failure."""


class LogNotificationSink(NotificationSink):
    """Sink that writes notifications to the application log."""

    def __init__(self, sender: str = ""):
        self.sender = sender

    async def send(self, notification: EmailNotification) -> None:
        logger.info(
            "notification %s from %s to %s: %s",
            notification.id,
            self.sender or "-",
            ", ".join(notification.recipients),
            notification.subject,
        )
        logger.debug("notification %s body:\n%s", notification.id, notification.content)


def build_subject(user: User, weeks: WeekRange) -> str:
    start, end = weeks.label().split(" - ")
    return f"Weekly tasks - {user.display_name} - {start} to {end}"


def _render_task(task: Task) -> str:
    lines = [
        f'<div class="task-item status-{task.status}">',
        f"<h4>{escape(task.title)}</h4>",
    ]
    if task.description:
        lines.append(f"<p>{escape(task.description)}</p>")
    lines.append(f"<p><strong>Priority:</strong> {task.priority.upper()}</p>")
    if task.status != "completed" and task.due_date:
        lines.append(f"<p><strong>Due:</strong> {task.due_date:%d/%m/%Y}</p>")
    lines.append(
        f"<p><strong>Hours:</strong> {task.actual_hours:g}h / "
        f"{task.estimated_hours:g}h estimated</p>"
    )
    lines.append("</div>")
    return "\n".join(lines)


def render_report(user: User, tasks: list[Task], weeks: WeekRange) -> str:
    """HTML body of the weekly report. All user text is escaped."""
    stats = compute_week_stats(tasks)
    name = escape(user.display_name)
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        '<head><meta charset="UTF-8"><title>Weekly task report</title>',
        f"<style>{_STYLE}</style></head>",
        "<body>",
        f'<div class="header"><h1>Weekly task report</h1><p>{name} - {weeks.label()}</p></div>',
        '<div class="summary"><h2>Week summary</h2><ul>',
        f"<li><strong>Total tasks:</strong> {stats.total}</li>",
        f"<li><strong>Completed:</strong> {stats.completed}</li>",
        f"<li><strong>In progress:</strong> {stats.in_progress}</li>",
        f"<li><strong>Pending:</strong> {stats.pending}</li>",
        f"<li><strong>Estimated hours:</strong> {stats.total_estimated:g}h</li>",
        f"<li><strong>Hours worked:</strong> {stats.total_actual:g}h</li>",
        "</ul></div>",
    ]
    for status, heading in _SECTIONS:
        section = [task for task in tasks if task.status == status]
        if not section:
            continue
        parts.append(f'<div class="task-section"><h3>{heading}</h3>')
        parts.extend(_render_task(task) for task in section)
        parts.append("</div>")
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)


class NotificationService:
    """Builds weekly reports and sends them through a sink."""

    def __init__(self, sink: NotificationSink | None = None):
        self.sink = sink or LogNotificationSink()
        self.sent: list[EmailNotification] = []

    def build_weekly_notification(
        self, user: User, tasks: list[Task], week_key: date
    ) -> EmailNotification:
        weeks = week_range(week_key)
        return EmailNotification(
            id=str(uuid.uuid4()),
            type="weekly",
            recipients=[user.email],
            subject=build_subject(user, weeks),
            content=render_report(user, tasks, weeks),
        )

    async def notify(self, user: User, tasks: list[Task], week_key: date) -> bool:
        """Send ``user`` the report for ``week_key``.

        Returns:
            True if the sink accepted the notification, False otherwise
        """
        notification = self.build_weekly_notification(user, tasks, week_key)
        try:
            await self.sink.send(notification)
        except Exception as e:
            logger.error("sending notification %s failed: %s", notification.id, e)
            notification.status = "failed"
            self.sent.append(notification)
            return False

        notification.status = "sent"
        notification.sent_at = datetime.now(UTC)
        self.sent.append(notification)
        logger.info("weekly report for %s sent to %s", week_key, user.email)
        return True
