from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_between
from ...core.enums import AttendanceStatus
from ...sessions.model import Session
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the late threshold but still inside the window."""

    def decide_checkin(self, *, now: datetime, session: Session, late_threshold_minutes: int) -> StatusDecision:
        minutes = int(minutes_between(session.start_time, now))
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Checked in {minutes} min after start")

    def decide_excuse_approval(self, *, current: Optional[AttendanceStatus]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EXCUSED)
