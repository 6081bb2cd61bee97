from __future__ import annotations

import math
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...core.constants import AT_RISK_FACTOR, REQUIRED_ATTENDANCE_PERCENTAGE
from ...core.enums import CREDITED_STATUSES, EligibilityStatus
from ...sessions.model import Session
from ..model import ExamEligibility
from .base import EligibilityCalculator


class StandardEligibilityCalculator(EligibilityCalculator):
    """Standard rule: present, late and excused sessions all count toward the threshold."""

    def __init__(self, required_percentage: float = REQUIRED_ATTENDANCE_PERCENTAGE, at_risk_factor: float = AT_RISK_FACTOR):
        self.required_percentage = required_percentage
        self.at_risk_factor = at_risk_factor

    def eligibility(
        self,
        student_address: str,
        course_code: str,
        sessions: Iterable[Session],
        records: Iterable[AttendanceRecord],
    ) -> ExamEligibility:
        course_ids = {s.session_id for s in sessions if s.course_code == course_code}
        total = len(course_ids)

        credited = {
            r.session_id
            for r in records
            if r.student_address == student_address and r.session_id in course_ids and r.status in CREDITED_STATUSES
        }
        attended = len(credited)

        percentage = attended / total * 100 if total else 0.0
        required = self.required_percentage
        is_eligible = total > 0 and percentage >= required
        needed = max(0, math.ceil(required * total / 100) - attended)

        if is_eligible:
            status = EligibilityStatus.ELIGIBLE
        elif total > 0 and percentage >= required * self.at_risk_factor:
            status = EligibilityStatus.AT_RISK
        else:
            status = EligibilityStatus.NOT_ELIGIBLE

        return ExamEligibility(
            student_address=student_address,
            course_code=course_code,
            total_sessions=total,
            attended_sessions=attended,
            attendance_percentage=percentage,
            required_percentage=required,
            is_eligible=is_eligible,
            status=status,
            sessions_needed=needed or None,
        )


def eligibility(
    student_address: str,
    course_code: str,
    sessions: Iterable[Session],
    records: Iterable[AttendanceRecord],
) -> ExamEligibility:
    """Eligibility under the default 75% policy."""
    return StandardEligibilityCalculator().eligibility(student_address, course_code, sessions, records)
