"""Utility functions for the SQLite adapter."""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from typing import Any

from weekboard.utils.errors import StoreError


def generate_uuid() -> str:
    """Generate a new UUID as string."""
    return str(uuid.uuid4())


def now_iso() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(UTC).isoformat()


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return {}
    return dict(row)


def to_column(value: Any) -> Any:
    """Convert a model value into something sqlite3 can bind.

    Dates become ISO strings; lists (tags, copy history) become JSON arrays.
    """
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, list):
        return json.dumps(
            [item.model_dump(mode="json") if hasattr(item, "model_dump") else item for item in value]
        )
    return value


def from_json_column(value: str | None) -> list[Any]:
    """Decode a JSON array column, treating NULL/empty as an empty list."""
    if not value:
        return []
    return json.loads(value)


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise sqlite3 failures as StoreError."""
    try:
        yield
    except sqlite3.Error as e:
        raise StoreError(f"{action} failed: {e}") from e
