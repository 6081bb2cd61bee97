from datetime import timedelta

import pytest

from geo_attendance.attendance.model import AttendanceRecord
from geo_attendance.core.enums import AttendanceStatus, EligibilityStatus
from geo_attendance.reports.calculator.standard_calculator import StandardEligibilityCalculator, eligibility
from geo_attendance.sessions.model import Session

from conftest import CHECKER, START, STUDENT, OTHER_STUDENT, VENUE


def _sessions(course_code: str, n: int, prefix: str = "s") -> list[Session]:
    return [
        Session(
            session_id=f"{prefix}-{i}",
            course_code=course_code,
            course_name=f"{course_code} course",
            description="",
            start_time=START + timedelta(days=i),
            end_time=START + timedelta(days=i, minutes=90),
            created_by=CHECKER,
            location=VENUE,
            allowed_radius=50,
            check_in_window=10,
            excuse_deadline_hours=48,
            declaration_time=START,
        )
        for i in range(n)
    ]


def _record(session: Session, status: AttendanceStatus, student: str = STUDENT) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=f"r-{session.session_id}-{student[:5]}",
        session_id=session.session_id,
        student_address=student,
        timestamp=session.start_time,
        status=status,
        location=None,
        location_verified=status != AttendanceStatus.EXCUSED,
        distance_from_class=0,
        check_in_attempts=0 if status == AttendanceStatus.EXCUSED else 1,
        transaction_id=f"tx-{session.session_id}",
    )


def test_excused_sessions_count_toward_eligibility():
    sessions = _sessions("CS101", 4)
    records = [
        _record(sessions[0], AttendanceStatus.PRESENT),
        _record(sessions[1], AttendanceStatus.LATE),
        _record(sessions[2], AttendanceStatus.EXCUSED),
    ]

    result = eligibility(STUDENT, "CS101", sessions, records)

    assert result.total_sessions == 4
    assert result.attended_sessions == 3
    assert result.attendance_percentage == 75.0
    assert result.is_eligible
    assert result.status == EligibilityStatus.ELIGIBLE
    assert result.sessions_needed is None


def test_one_of_four_is_not_eligible():
    sessions = _sessions("CS101", 4)
    result = eligibility(STUDENT, "CS101", sessions, [_record(sessions[0], AttendanceStatus.PRESENT)])

    assert result.attendance_percentage == 25.0
    assert not result.is_eligible
    assert result.status == EligibilityStatus.NOT_ELIGIBLE
    assert result.sessions_needed == 2


def test_at_risk_band():
    sessions = _sessions("CS101", 10)
    records = [_record(s, AttendanceStatus.PRESENT) for s in sessions[:7]]

    result = eligibility(STUDENT, "CS101", sessions, records)

    assert result.attendance_percentage == pytest.approx(70.0)
    assert result.status == EligibilityStatus.AT_RISK
    assert result.sessions_needed == 1


def test_course_without_sessions():
    result = eligibility(STUDENT, "CS101", _sessions("MATH201", 2), [])

    assert result.total_sessions == 0
    assert result.attendance_percentage == 0.0
    assert not result.is_eligible
    assert result.status == EligibilityStatus.NOT_ELIGIBLE
    assert result.sessions_needed is None


def test_absent_and_foreign_records_are_ignored():
    cs = _sessions("CS101", 2)
    math = _sessions("MATH201", 2, prefix="m")
    records = [
        _record(cs[0], AttendanceStatus.ABSENT),
        _record(cs[1], AttendanceStatus.PRESENT, student=OTHER_STUDENT),
        _record(math[0], AttendanceStatus.PRESENT),
    ]

    result = eligibility(STUDENT, "CS101", cs + math, records)

    assert result.attended_sessions == 0
    assert result.sessions_needed == 2


def test_eligibility_is_deterministic():
    sessions = _sessions("CS101", 3)
    records = [_record(sessions[0], AttendanceStatus.PRESENT)]
    assert eligibility(STUDENT, "CS101", sessions, records) == eligibility(STUDENT, "CS101", sessions, records)


def test_custom_required_percentage():
    sessions = _sessions("CS101", 4)
    records = [_record(s, AttendanceStatus.PRESENT) for s in sessions[:2]]

    result = StandardEligibilityCalculator(required_percentage=50).eligibility(STUDENT, "CS101", sessions, records)

    assert result.is_eligible
    assert result.required_percentage == 50
