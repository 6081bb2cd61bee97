from datetime import timedelta

from geo_attendance.attendance.model import AttendanceRecord
from geo_attendance.core.enums import AttendanceStatus, RejectionCode
from geo_attendance.sessions.model import Session
from geo_attendance.verification.validator import CheckInValidator

from conftest import CHECKER, END, START, STUDENT, VENUE, north_of


def _session(**overrides) -> Session:
    data = dict(
        session_id="s-1",
        course_code="CS101",
        course_name="Computer Science 101",
        description="",
        start_time=START,
        end_time=END,
        created_by=CHECKER,
        location=VENUE,
        allowed_radius=50,
        check_in_window=10,
        excuse_deadline_hours=48,
        declaration_time=START - timedelta(hours=1),
    )
    data.update(overrides)
    return Session(**data)


def _record(session_id: str = "s-1", student: str = STUDENT) -> AttendanceRecord:
    return AttendanceRecord(
        record_id="r-1",
        session_id=session_id,
        student_address=student,
        timestamp=START,
        status=AttendanceStatus.PRESENT,
        location=VENUE,
        location_verified=True,
        distance_from_class=0,
        check_in_attempts=1,
        transaction_id="attendance-tx-1",
    )


def test_valid_check_in_has_no_reasons():
    check = CheckInValidator().check(
        session=_session(),
        student_address=STUDENT,
        location=north_of(VENUE, 30),
        existing_records=[],
        now=START + timedelta(minutes=2),
    )
    assert check.overall_valid
    assert check.reasons == ()
    assert check.distance_meters == 30


def test_every_failed_rule_is_reported():
    check = CheckInValidator().check(
        session=_session(is_active=False),
        student_address="not-a-wallet",
        location=north_of(VENUE, 120),
        existing_records=[_record(student="not-a-wallet")],
        now=START + timedelta(minutes=15),
    )

    assert not check.overall_valid
    assert [r.code for r in check.reasons] == [
        RejectionCode.OUT_OF_RANGE,
        RejectionCode.WINDOW_CLOSED,
        RejectionCode.DUPLICATE_CHECK_IN,
        RejectionCode.INVALID_IDENTITY,
        RejectionCode.SESSION_INACTIVE,
    ]
    assert check.messages[0] == "You are 120m away from class location. Maximum allowed distance is 50m."
    assert "You had 10 minutes from 09:00:00" in check.messages[1]


def test_before_start_is_not_open():
    check = CheckInValidator().check(
        session=_session(),
        student_address=STUDENT,
        location=VENUE,
        existing_records=[],
        now=START - timedelta(minutes=1),
    )
    assert [r.code for r in check.reasons] == [RejectionCode.WINDOW_NOT_OPEN]
    assert check.messages == ["Class hasn't started yet. Check-in opens at 09:00:00."]


def test_records_of_other_sessions_are_not_duplicates():
    check = CheckInValidator().check(
        session=_session(),
        student_address=STUDENT,
        location=VENUE,
        existing_records=[_record(session_id="s-2")],
        now=START,
    )
    assert check.no_duplicates
    assert check.overall_valid
