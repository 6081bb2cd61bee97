from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...sessions.model import Session
from .base import AttendanceStrategy, StatusDecision


class ExcusedStrategy(AttendanceStrategy):
    """Approved excuse: administratively excused, not physically verified."""

    def decide_checkin(self, *, now: datetime, session: Session, late_threshold_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EXCUSED)

    def decide_excuse_approval(self, *, current: Optional[AttendanceStatus]) -> StatusDecision:
        note = None if current is None else f"Overrides {current.value}"
        return StatusDecision(status=AttendanceStatus.EXCUSED, note=note)
