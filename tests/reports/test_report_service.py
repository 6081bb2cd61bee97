from datetime import timedelta

import pytest

from geo_attendance.core.enums import EligibilityStatus
from geo_attendance.core.exceptions import NotFoundError

from conftest import CHECKER, END, START, STUDENT, OTHER_STUDENT, VENUE, north_of


@pytest.fixture
def term(container, declare):
    """Two MATH201 sessions around one PHYS301 session; STUDENT attends, is late, and is excused."""
    math1 = declare(course_code="MATH201", course_name="Advanced Mathematics", start=START)
    phys = declare(course_code="PHYS301", course_name="Advanced Physics", start=START + timedelta(days=1))
    math2 = declare(course_code="MATH201", course_name="Advanced Mathematics", start=START + timedelta(days=2))

    attendance = container.attendance_service
    attendance.check_in(session_id=math1.session_id, student_address=STUDENT, location=VENUE, now=START)
    attendance.check_in(
        session_id=phys.session_id,
        student_address=STUDENT,
        location=north_of(VENUE, 20),
        now=START + timedelta(days=1, minutes=8),
    )
    attendance.check_in(session_id=math1.session_id, student_address=OTHER_STUDENT, location=VENUE, now=START)

    after = END + timedelta(days=2, hours=1)
    excuse = container.excuse_service.submit(
        session_id=math2.session_id, student_address=STUDENT, reason="Sick", now=after
    )
    container.excuse_service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=after)
    return math1, phys, math2


def test_course_summaries_keep_first_seen_order(container, term):
    summaries = container.report_service.course_summaries(student_address=STUDENT)

    assert [s.course_code for s in summaries] == ["MATH201", "PHYS301"]

    math = summaries[0]
    assert math.course_name == "Advanced Mathematics"
    assert math.total_sessions == 2
    assert math.attended_sessions == 1
    assert math.excused_sessions == 1
    assert math.missed_sessions == 0
    assert math.attendance_percentage == 100.0
    assert math.exam_eligibility.status == EligibilityStatus.ELIGIBLE


def test_student_stats(container, term):
    stats = container.report_service.student_stats(student_address=STUDENT)

    assert stats.total_sessions == 3
    assert stats.attended_sessions == 2
    assert stats.excused_absences == 1
    assert stats.unexcused_absences == 0
    assert stats.attendance_rate == pytest.approx(200 / 3)


def test_eligibility_for_other_student(container, term):
    result = container.report_service.eligibility(student_address=OTHER_STUDENT, course_code="MATH201")
    assert result.attendance_percentage == 50.0
    assert result.status == EligibilityStatus.NOT_ELIGIBLE
    assert result.sessions_needed == 1


def test_session_roster(container, term):
    math1, phys, math2 = term

    roster = container.report_service.session_roster(session_id=math1.session_id)
    assert roster.attendee_count == 2
    assert roster.present == 2
    assert roster.location_verified == 2

    late = container.report_service.session_roster(session_id=phys.session_id)
    assert late.late == 1

    excused = container.report_service.session_roster(session_id=math2.session_id)
    assert excused.excused == 1
    assert excused.location_verified == 0
    assert excused.attendee_count == 0


def test_roster_for_unknown_session(container):
    with pytest.raises(NotFoundError):
        container.report_service.session_roster(session_id="missing")


def test_summary_to_dict_serializes_status(container, term):
    data = container.report_service.course_summaries(student_address=STUDENT)[1].to_dict()
    assert data["course_code"] == "PHYS301"
    assert data["exam_eligibility"]["status"] == "eligible"
