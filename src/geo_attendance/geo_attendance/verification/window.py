"""Time windows around a session: check-in window, lateness, excuse deadline."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus


def check_in_deadline(session_start: datetime, window_minutes: int) -> datetime:
    return session_start + timedelta(minutes=window_minutes)


def in_check_in_window(now: datetime, session_start: datetime, window_minutes: int) -> bool:
    return session_start <= now <= check_in_deadline(session_start, window_minutes)


def classify(
    now: datetime,
    session_start: datetime,
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
) -> AttendanceStatus:
    """PRESENT up to the late threshold (inclusive), LATE afterwards.

    Only called for check-ins already inside the check-in window, so the
    result is never ABSENT.
    """
    if now - session_start <= timedelta(minutes=late_threshold_minutes):
        return AttendanceStatus.PRESENT
    return AttendanceStatus.LATE


def excuse_deadline(session_end: datetime, deadline_hours: int) -> datetime:
    return session_end + timedelta(hours=deadline_hours)


def within_excuse_deadline(now: datetime, session_end: datetime, deadline_hours: int) -> bool:
    return now <= excuse_deadline(session_end, deadline_hours)


def excuse_window_open(now: datetime, session_end: datetime) -> bool:
    """Excuses are accepted only once the session is over."""
    return now > session_end
