from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..sessions.model import Session
from ..verification.window import classify
from .strategies.base import AttendanceStrategy
from .strategies.excused_strategy import ExcusedStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy

# None stands for "no record yet". ABSENT is never written by the engine but may
# come from an external store, and it can still be excused.
ALLOWED_TRANSITIONS: dict[Optional[AttendanceStatus], frozenset[AttendanceStatus]] = {
    None: frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EXCUSED}),
    AttendanceStatus.PRESENT: frozenset({AttendanceStatus.EXCUSED}),
    AttendanceStatus.LATE: frozenset({AttendanceStatus.EXCUSED}),
    AttendanceStatus.ABSENT: frozenset({AttendanceStatus.EXCUSED}),
    AttendanceStatus.EXCUSED: frozenset(),
}


def ensure_transition(current: Optional[AttendanceStatus], target: AttendanceStatus) -> None:
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        source = current.value if current else "none"
        raise ValidationError(f"Cannot change attendance status from {source} to {target.value}")


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES

    def for_checkin(self, *, now: datetime, session: Session) -> AttendanceStrategy:
        if classify(now, session.start_time, self.late_threshold_minutes) == AttendanceStatus.PRESENT:
            return PresentStrategy()
        return LateStrategy()

    def for_excuse_approval(self, *, current: Optional[AttendanceStatus]) -> AttendanceStrategy:
        if current == AttendanceStatus.EXCUSED:
            raise ValidationError("Attendance is already excused")
        return ExcusedStrategy()
