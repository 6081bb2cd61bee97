from __future__ import annotations

from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..sessions.repository import SessionRepository
from .calculator.base import EligibilityCalculator
from .calculator.standard_calculator import StandardEligibilityCalculator
from .model import AttendanceStats, CourseAttendanceSummary, ExamEligibility, SessionRoster
from .summary import attendance_stats, course_summaries


class AttendanceReportService:
    """Read-only reports; every call works on one snapshot of the store."""

    def __init__(
        self,
        sessions: SessionRepository,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[EligibilityCalculator] = None,
    ):
        self._sessions = sessions
        self._attendance = attendance
        self._calculator = calculator or StandardEligibilityCalculator()

    def eligibility(self, *, student_address: str, course_code: str) -> ExamEligibility:
        sessions = self._sessions.list_by_course(course_code)
        records = self._attendance.list_for_student(student_address)
        return self._calculator.eligibility(student_address, course_code, sessions, records)

    def course_summaries(self, *, student_address: str) -> list[CourseAttendanceSummary]:
        sessions = self._sessions.list_all()
        records = self._attendance.list_for_student(student_address)
        return course_summaries(student_address, sessions, records, calculator=self._calculator)

    def student_stats(self, *, student_address: str) -> AttendanceStats:
        sessions = self._sessions.list_all()
        records = self._attendance.list_for_student(student_address)
        return attendance_stats(student_address, sessions, records)

    def session_roster(self, *, session_id: str) -> SessionRoster:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found")

        records = self._attendance.list_for_session(session_id)
        return SessionRoster(
            session_id=session_id,
            attendee_count=session.attendee_count,
            present=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
            late=sum(1 for r in records if r.status == AttendanceStatus.LATE),
            excused=sum(1 for r in records if r.status == AttendanceStatus.EXCUSED),
            location_verified=sum(1 for r in records if r.location_verified),
        )
