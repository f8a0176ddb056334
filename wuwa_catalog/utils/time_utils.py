"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def elapsed_seconds(started_at: datetime, finished_at: datetime | None) -> float | None:
    """Seconds between two timestamps, or ``None`` while a run is in flight."""
    if finished_at is None:
        return None
    return round((finished_at - started_at).total_seconds(), 3)
