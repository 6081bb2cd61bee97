from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..core.enums import EligibilityStatus


@dataclass(frozen=True)
class ExamEligibility:
    """Read-model: exam eligibility of one student in one course.

    Derived from sessions and records only; never stored.
    """

    student_address: str
    course_code: str
    total_sessions: int
    attended_sessions: int
    attendance_percentage: float
    required_percentage: float
    is_eligible: bool
    status: EligibilityStatus
    sessions_needed: Optional[int] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class CourseAttendanceSummary:
    course_code: str
    course_name: str
    total_sessions: int
    attended_sessions: int
    excused_sessions: int
    missed_sessions: int
    attendance_percentage: float
    exam_eligibility: ExamEligibility

    def to_dict(self) -> dict:
        return {
            "course_code": self.course_code,
            "course_name": self.course_name,
            "total_sessions": self.total_sessions,
            "attended_sessions": self.attended_sessions,
            "excused_sessions": self.excused_sessions,
            "missed_sessions": self.missed_sessions,
            "attendance_percentage": self.attendance_percentage,
            "exam_eligibility": self.exam_eligibility.to_dict(),
        }


@dataclass(frozen=True)
class AttendanceStats:
    total_sessions: int
    attended_sessions: int
    excused_absences: int
    unexcused_absences: int
    attendance_rate: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SessionRoster:
    session_id: str
    attendee_count: int
    present: int
    late: int
    excused: int
    location_verified: int

    def to_dict(self) -> dict:
        return asdict(self)
