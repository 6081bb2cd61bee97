"""Per-course folding of sessions and records for one student."""

from __future__ import annotations

from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, PHYSICAL_STATUSES
from ..sessions.model import Session
from .calculator.base import EligibilityCalculator
from .calculator.standard_calculator import StandardEligibilityCalculator
from .model import AttendanceStats, CourseAttendanceSummary


def _statuses_by_session(student_address: str, records: Iterable[AttendanceRecord]) -> dict[str, AttendanceStatus]:
    return {r.session_id: r.status for r in records if r.student_address == student_address}


def _percentage(part: int, total: int) -> float:
    return part / total * 100 if total else 0.0


def course_summaries(
    student_address: str,
    sessions: Iterable[Session],
    records: Iterable[AttendanceRecord],
    *,
    calculator: Optional[EligibilityCalculator] = None,
) -> list[CourseAttendanceSummary]:
    """One row per course, in first-seen session order.

    ``attended`` counts present and late only; ``excused`` is reported apart.
    The row percentage uses attended + excused, same as eligibility.
    """
    calculator = calculator or StandardEligibilityCalculator()
    sessions = list(sessions)
    records = list(records)
    statuses = _statuses_by_session(student_address, records)

    courses: dict[str, list[Session]] = {}
    for s in sessions:
        courses.setdefault(s.course_code, []).append(s)

    out: list[CourseAttendanceSummary] = []
    for course_code, course_sessions in courses.items():
        total = len(course_sessions)
        course_statuses = [statuses.get(s.session_id) for s in course_sessions]
        attended = sum(1 for st in course_statuses if st in PHYSICAL_STATUSES)
        excused = sum(1 for st in course_statuses if st == AttendanceStatus.EXCUSED)

        out.append(
            CourseAttendanceSummary(
                course_code=course_code,
                course_name=course_sessions[0].course_name or "Unknown Course",
                total_sessions=total,
                attended_sessions=attended,
                excused_sessions=excused,
                missed_sessions=total - attended - excused,
                attendance_percentage=_percentage(attended + excused, total),
                exam_eligibility=calculator.eligibility(student_address, course_code, sessions, records),
            )
        )
    return out


def attendance_stats(
    student_address: str,
    sessions: Iterable[Session],
    records: Iterable[AttendanceRecord],
) -> AttendanceStats:
    sessions = list(sessions)
    statuses = _statuses_by_session(student_address, records)
    course_statuses = [statuses.get(s.session_id) for s in sessions]

    total = len(sessions)
    attended = sum(1 for st in course_statuses if st in PHYSICAL_STATUSES)
    excused = sum(1 for st in course_statuses if st == AttendanceStatus.EXCUSED)
    return AttendanceStats(
        total_sessions=total,
        attended_sessions=attended,
        excused_absences=excused,
        unexcused_absences=total - attended - excused,
        attendance_rate=_percentage(attended, total),
    )
