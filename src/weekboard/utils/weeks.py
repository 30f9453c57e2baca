"""Week bucketing helpers.

A week key is the Monday ``date`` of a calendar week. Keys travel as
``YYYY-MM-DD`` strings at the edges (CLI, JSON documents, SQLite columns).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import NamedTuple

from weekboard.utils.errors import InvalidArgumentError

WEEK_KEY_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%d/%m/%Y"

# Monday through Friday inclusive
WORKING_DAYS_SPAN = 4


class WeekRange(NamedTuple):
    """Displayable span of a week bucket."""

    start: date
    end: date

    def label(self) -> str:
        return f"{self.start.strftime(DISPLAY_FORMAT)} - {self.end.strftime(DISPLAY_FORMAT)}"


def monday_of(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    weekday = day.isoweekday()  # Monday=1 ... Sunday=7
    offset = 6 if weekday == 7 else weekday - 1
    return day - timedelta(days=offset)


def current_week_key(today: date | None = None) -> date:
    """Return the Monday of the current week."""
    if today is None:
        today = date.today()
    return monday_of(today)


def week_range(week_key: date) -> WeekRange:
    """Return the Monday-Friday range starting at ``week_key``.

    The key is taken as-is; callers pass keys produced by this module.
    """
    return WeekRange(start=week_key, end=week_key + timedelta(days=WORKING_DAYS_SPAN))


def available_weeks(current_week: date, count: int = 8) -> list[date]:
    """List week keys around ``current_week`` in chronological order.

    ``count // 2`` weeks before, the current key unchanged, and ``count // 2``
    weeks after.
    """
    if count < 0:
        raise InvalidArgumentError(f"Week count must not be negative: {count}")
    half = count // 2
    past = [monday_of(current_week - timedelta(weeks=i)) for i in range(half, 0, -1)]
    future = [monday_of(current_week + timedelta(weeks=i)) for i in range(1, half + 1)]
    return [*past, current_week, *future]


def parse_week_key(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` week key.

    Raises:
        InvalidArgumentError: If the value is empty or malformed
    """
    if isinstance(value, date):
        return value
    if not value or not value.strip():
        raise InvalidArgumentError("Week key is required")
    try:
        return datetime.strptime(value.strip(), WEEK_KEY_FORMAT).date()
    except ValueError as e:
        raise InvalidArgumentError(
            f"Invalid week key '{value}', expected YYYY-MM-DD"
        ) from e


def format_week_key(day: date) -> str:
    return day.strftime(WEEK_KEY_FORMAT)
