"""Shared option handling for commands."""

from __future__ import annotations

from datetime import date

from weekboard.models import Task
from weekboard.services.config_service import get_config_service
from weekboard.utils.errors import InvalidArgumentError
from weekboard.utils.ui.formatters import OUTPUT_FORMATS
from weekboard.utils.weeks import current_week_key, monday_of, parse_week_key


def resolve_week(value: str | None) -> date:
    """Week key for a ``--week`` option: any date in the week, or this week."""
    if value is None:
        return current_week_key()
    return monday_of(parse_week_key(value))


def resolve_user_id(value: str | None) -> str:
    """User for a ``--user`` option, falling back to the context's user."""
    if value:
        return value
    user_id = get_config_service().get_current_context().user_id
    if not user_id:
        raise InvalidArgumentError(
            "No user given. Pass --user or set one with 'weekboard context add --user'"
        )
    return user_id


def resolve_output(value: str | None) -> str:
    """Output format for ``-o``, defaulting to the configured format."""
    output = value or get_config_service().config.output.format
    if output not in OUTPUT_FORMATS:
        raise InvalidArgumentError(
            f"Unknown output format '{output}'. Choose from: {', '.join(OUTPUT_FORMATS)}"
        )
    return output


def split_tags(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def tasks_to_dicts(tasks: list[Task]) -> list[dict]:
    return [task.model_dump(mode="json") for task in tasks]
