"""Tests for weekly report rendering and sending."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from weekboard.models import EmailNotification
from weekboard.services.notification_service import (
    LogNotificationSink,
    NotificationService,
    NotificationSink,
    build_subject,
    render_report,
)
from weekboard.utils.weeks import week_range

WEEK = date(2024, 1, 8)


class RecordingSink(NotificationSink):
    def __init__(self):
        self.received: list[EmailNotification] = []

    async def send(self, notification: EmailNotification) -> None:
        self.received.append(notification)


class FailingSink(NotificationSink):
    async def send(self, notification: EmailNotification) -> None:
        raise ConnectionError("smtp down")


class TestRenderReport:
    def test_subject_uses_long_name_and_week_range(self, make_user):
        subject = build_subject(make_user(), week_range(WEEK))
        assert subject == "Weekly tasks - Ana Torres - 08/01/2024 to 12/01/2024"

    def test_subject_falls_back_to_short_name(self, make_user):
        subject = build_subject(make_user(long_name=""), week_range(WEEK))
        assert "- ana -" in subject

    def test_sections_and_summary(self, make_user, make_task):
        tasks = [
            make_task(id="a", title="Shipped", status="completed"),
            make_task(id="b", title="Underway", status="in-progress"),
            make_task(id="c", title="Queued", status="todo", due_date=date(2024, 1, 11)),
        ]
        html = render_report(make_user(), tasks, week_range(WEEK))

        assert "<strong>Total tasks:</strong> 3" in html
        assert "Completed tasks" in html
        assert "Tasks in progress" in html
        assert "Pending tasks" in html
        assert "11/01/2024" in html
        assert html.index("Shipped") < html.index("Underway") < html.index("Queued")

    def test_empty_sections_are_omitted(self, make_user, make_task):
        html = render_report(make_user(), [make_task(status="todo")], week_range(WEEK))
        assert "Completed tasks" not in html
        assert "Pending tasks" in html

    def test_user_text_is_escaped(self, make_user, make_task):
        task = make_task(title="<script>alert(1)</script>", description="a & b")
        html = render_report(make_user(long_name="<b>Ana</b>"), [task], week_range(WEEK))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "a &amp; b" in html
        assert "&lt;b&gt;Ana&lt;/b&gt;" in html


class TestNotificationService:
    @pytest.mark.asyncio
    async def test_notify_sends_through_sink(self, make_user, make_task):
        sink = RecordingSink()
        service = NotificationService(sink)

        assert await service.notify(make_user(), [make_task()], WEEK) is True

        notification = sink.received[0]
        assert notification.recipients == ["ana@example.com"]
        assert notification.type == "weekly"
        assert notification.status == "sent"
        assert notification.sent_at is not None
        assert service.sent == [notification]

    @pytest.mark.asyncio
    async def test_sink_failure_is_reported(self, make_user):
        service = NotificationService(FailingSink())

        with patch("weekboard.services.notification_service.logger") as mock_logger:
            assert await service.notify(make_user(), [], WEEK) is False

        assert service.sent[0].status == "failed"
        assert service.sent[0].sent_at is None
        mock_logger.error.assert_called_once()

    def test_default_sink_logs(self):
        assert isinstance(NotificationService().sink, LogNotificationSink)

    @pytest.mark.asyncio
    async def test_log_sink_writes_subject(self, make_user):
        notification = NotificationService().build_weekly_notification(make_user(), [], WEEK)
        sink = LogNotificationSink(sender="reports@example.com")

        with patch("weekboard.services.notification_service.logger") as mock_logger:
            await sink.send(notification)

        args = mock_logger.info.call_args.args
        assert "reports@example.com" in args
        assert notification.subject in args

    @pytest.mark.asyncio
    async def test_custom_sink_can_be_mocked(self, make_user):
        sink = AsyncMock(spec=NotificationSink)
        service = NotificationService(sink)

        await service.notify(make_user(), [], WEEK)
        sink.send.assert_awaited_once()
