"""Input validation helpers shared by the domain schemas and services."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timedelta

from evorbrain.core.errors import ValidationError
from evorbrain.core.utils.dates import today, to_naive_utc, utcnow

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
TASK_DESCRIPTION_MAX_LENGTH = 2000
NOTE_TITLE_MAX_LENGTH = 200
NOTE_CONTENT_MAX_LENGTH = 50_000
MAX_ESTIMATED_MINUTES = 7 * 24 * 60
TASK_DUE_DATE_GRACE = timedelta(hours=1)
TASK_DUE_DATE_HORIZON = timedelta(days=730)

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def clean_name(value: str, *, field: str = "Name", max_length: int = NAME_MAX_LENGTH) -> str:
    """Trim and check a display name; raises ``ValueError`` for pydantic."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    if "\0" in value or "\r" in value:
        raise ValueError(f"{field} contains invalid characters")
    return value


def clean_description(value: str | None, *, max_length: int = DESCRIPTION_MAX_LENGTH) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(f"Description must be at most {max_length} characters")
    return value or None


def clean_color(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    if not _HEX_COLOR.match(value):
        raise ValueError("Color must be a hex code like #RGB or #RRGGBB")
    return value


def check_not_past(value: date | None, *, field: str = "Target date") -> date | None:
    if value is not None and value < today():
        raise ValueError(f"{field} cannot be in the past")
    return value


def check_task_due_date(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    value = to_naive_utc(value)
    now = utcnow()
    if value < now - TASK_DUE_DATE_GRACE:
        raise ValueError("Due date cannot be in the past")
    if value > now + TASK_DUE_DATE_HORIZON:
        raise ValueError("Due date cannot be more than 2 years in the future")
    return value


def require_uuid(value: str, entity: str) -> str:
    """Raise ``ValidationError`` unless ``value`` parses as a UUID."""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {entity} ID format")
    return str(value)


def new_id() -> str:
    return str(uuid.uuid4())
