"""Unit tests for in-memory task filtering and ordering."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from weekboard.models import TaskFilters
from weekboard.utils.task_filters import (
    by_text,
    filter_tasks,
    matches_filters,
    sort_tasks,
)


@pytest.fixture
def tasks(make_task):
    return [
        make_task(
            id="a",
            title="Deploy API",
            priority="high",
            status="in-progress",
            week_of=date(2024, 1, 8),
            due_date=date(2024, 1, 12),
            created_at=datetime(2024, 1, 8, 9, tzinfo=UTC),
        ),
        make_task(
            id="b",
            title="Write docs",
            description="API reference",
            priority="low",
            week_of=date(2024, 1, 8),
            created_at=datetime(2024, 1, 9, 9, tzinfo=UTC),
        ),
        make_task(
            id="c",
            title="Fix login",
            priority="urgent",
            ticket_number="SD-42",
            week_of=date(2024, 1, 15),
            due_date=date(2024, 1, 10),
            created_at=datetime(2024, 1, 15, 9, tzinfo=UTC),
        ),
        make_task(
            id="d",
            title="Other person's task",
            assignee_id="user-2",
            week_of=date(2024, 1, 8),
            created_at=datetime(2024, 1, 10, 9, tzinfo=UTC),
        ),
    ]


def ids(tasks):
    return [task.id for task in tasks]


class TestFilterTasks:
    def test_no_filters_keeps_everything_newest_week_first(self, tasks):
        assert ids(filter_tasks(tasks, TaskFilters())) == ["c", "d", "b", "a"]

    def test_assignee_and_week(self, tasks):
        result = filter_tasks(
            tasks, TaskFilters(assignee_id="user-1", week_of=date(2024, 1, 8))
        )
        assert ids(result) == ["b", "a"]

    def test_weeks_union(self, tasks):
        result = filter_tasks(
            tasks,
            TaskFilters(assignee_id="user-1", weeks=[date(2024, 1, 8), date(2024, 1, 15)]),
        )
        assert set(ids(result)) == {"a", "b", "c"}

    def test_empty_weeks_matches_nothing(self, tasks):
        assert filter_tasks(tasks, TaskFilters(weeks=[])) == []

    def test_status_and_priority(self, tasks):
        assert ids(filter_tasks(tasks, TaskFilters(status="in-progress"))) == ["a"]
        assert ids(filter_tasks(tasks, TaskFilters(priority="urgent"))) == ["c"]

    def test_limit(self, tasks):
        assert len(filter_tasks(tasks, TaskFilters(limit=2))) == 2


class TestTextSearch:
    def test_matches_title_case_insensitively(self, make_task):
        assert by_text("deploy")(make_task(title="Deploy API"))

    def test_matches_description(self, tasks):
        result = filter_tasks(tasks, TaskFilters(search="api"))
        assert set(ids(result)) == {"a", "b"}

    def test_matches_ticket_number(self, tasks):
        assert ids(filter_tasks(tasks, TaskFilters(search="sd-42"))) == ["c"]

    def test_no_match(self, tasks):
        assert not matches_filters(tasks[0], TaskFilters(search="nothing like it"))


class TestSortTasks:
    def test_due_date_ascending_puts_undated_last(self, tasks):
        result = sort_tasks(tasks, "due_date:asc")
        assert ids(result)[:2] == ["c", "a"]
        assert all(task.due_date is None for task in result[2:])

    def test_due_date_descending_also_puts_undated_last(self, tasks):
        result = sort_tasks(tasks, "due_date:desc")
        assert ids(result)[:2] == ["a", "c"]
        assert all(task.due_date is None for task in result[2:])

    def test_priority_descending(self, tasks):
        result = sort_tasks(tasks, "priority:desc")
        assert [t.priority for t in result] == ["urgent", "high", "medium", "low"]

    def test_direction_defaults_to_ascending(self, tasks):
        result = sort_tasks(tasks, "created_at")
        assert ids(result) == ["a", "b", "d", "c"]
