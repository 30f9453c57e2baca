"""Tests for Kanban grouping, week stats and card moves."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from weekboard.services.board_service import (
    BOARD_COLUMNS,
    build_board,
    compute_week_stats,
    move_card,
)


class TestBuildBoard:
    def test_four_columns_in_order(self):
        columns = build_board([])
        assert [c.status for c in columns] == ["todo", "in-progress", "completed", "blocked"]
        assert [c.title for c in columns] == [title for _, title in BOARD_COLUMNS]
        assert all(c.tasks == [] for c in columns)

    def test_groups_by_status_keeping_order(self, make_task):
        tasks = [
            make_task(id="a", status="todo"),
            make_task(id="b", status="completed"),
            make_task(id="c", status="todo"),
            make_task(id="d", status="blocked"),
        ]
        columns = {c.status: c for c in build_board(tasks)}

        assert [t.id for t in columns["todo"].tasks] == ["a", "c"]
        assert [t.id for t in columns["completed"].tasks] == ["b"]
        assert [t.id for t in columns["blocked"].tasks] == ["d"]
        assert columns["in-progress"].tasks == []

    def test_every_task_lands_in_exactly_one_column(self, make_task):
        tasks = [make_task(id=str(i), status=s) for i, s in enumerate(
            ["todo", "in-progress", "completed", "blocked", "todo"]
        )]
        columns = build_board(tasks)
        assert sum(len(c.tasks) for c in columns) == len(tasks)

    def test_column_limits(self, make_task):
        tasks = [make_task(id="a", status="in-progress"), make_task(id="b", status="in-progress")]
        columns = {c.status: c for c in build_board(tasks, {"in-progress": 1})}

        assert columns["in-progress"].max_tasks == 1
        assert columns["in-progress"].over_limit
        assert columns["todo"].max_tasks is None


class TestComputeWeekStats:
    def test_empty_week(self):
        stats = compute_week_stats([])
        assert stats.total == 0
        assert stats.total_estimated == 0

    def test_counts_and_hours(self, make_task):
        tasks = [
            make_task(status="completed", estimated_hours=4, actual_hours=4.5),
            make_task(status="todo", estimated_hours=2),
            make_task(status="in-progress", estimated_hours=1.5, actual_hours=1),
        ]
        stats = compute_week_stats(tasks)

        assert stats.total == 3
        assert stats.completed == 1
        assert stats.pending == 1
        assert stats.in_progress == 1
        assert stats.blocked == 0
        assert stats.total_estimated == 7.5
        assert stats.total_actual == 5.5


class TestMoveCard:
    @pytest.mark.asyncio
    async def test_drop_on_other_column_moves(self):
        service = MagicMock()
        service.move_status = AsyncMock(return_value=True)

        assert await move_card(service, "task-1", "todo", "completed") is True
        service.move_status.assert_awaited_once_with("task-1", "completed")

    @pytest.mark.asyncio
    async def test_drop_on_same_column_is_noop(self):
        service = MagicMock()
        service.move_status = AsyncMock()

        assert await move_card(service, "task-1", "todo", "todo") is False
        service.move_status.assert_not_called()
