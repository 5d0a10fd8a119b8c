"""Date helpers."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Naive UTC now, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Half-open ``[start, end)`` datetimes covering ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None
