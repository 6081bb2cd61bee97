from __future__ import annotations

from datetime import datetime


def as_local_naive(value: datetime) -> datetime:
    """Offset-aware values become naive local time, the convention ``now_local`` uses."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``2026-02-01T08:30:00``, ``...+00:00`` or ``...Z``)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_local_naive(datetime.fromisoformat(value))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take an explicit ``now`` in tests.
    """
    return datetime.now()


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60
