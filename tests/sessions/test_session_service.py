from datetime import timedelta, timezone

import pytest

from geo_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError

from conftest import CHECKER, OTHER_CHECKER, START


def test_declare_applies_defaults(session):
    assert session.allowed_radius == 50
    assert session.check_in_window == 10
    assert session.excuse_deadline_hours == 48
    assert session.is_active
    assert session.attendee_count == 0
    assert session.created_by == CHECKER
    assert session.declaration_time == START - timedelta(hours=1)
    assert session.transaction_id.startswith("session-tx-")


def test_declare_keeps_explicit_settings(declare):
    session = declare(allowed_radius=25, check_in_window=15, excuse_deadline_hours=24)
    assert (session.allowed_radius, session.check_in_window, session.excuse_deadline_hours) == (25, 15, 24)


def test_only_plausible_wallets_declare(declare):
    with pytest.raises(AuthorizationError):
        declare(creator="demo-checker")


def test_session_must_end_after_start(declare):
    with pytest.raises(ValidationError):
        declare(end=START)


def test_course_code_is_required(declare):
    with pytest.raises(ValidationError):
        declare(course_code="  ")


def test_negative_radius_is_rejected(declare):
    with pytest.raises(ValidationError):
        declare(allowed_radius=-5)


def test_deactivate_is_creator_only_and_idempotent(container, session):
    service = container.session_service

    with pytest.raises(AuthorizationError):
        service.deactivate(requester=OTHER_CHECKER, session_id=session.session_id)

    assert not service.deactivate(requester=CHECKER, session_id=session.session_id).is_active
    assert not service.deactivate(requester=CHECKER, session_id=session.session_id).is_active
    assert service.list_active() == []


def test_queries(container, declare):
    cs = declare()
    math = declare(course_code="MATH201", course_name="Advanced Mathematics", creator=OTHER_CHECKER)
    service = container.session_service

    assert [s.session_id for s in service.list_active()] == [cs.session_id, math.session_id]
    assert [s.session_id for s in service.list_for_course("MATH201")] == [math.session_id]
    assert [s.session_id for s in service.list_for_creator(CHECKER)] == [cs.session_id]
    assert service.get(cs.session_id) == cs

    with pytest.raises(NotFoundError):
        service.get("missing")


def test_declare_stores_offset_times_as_local(declare):
    start = START.astimezone(timezone.utc)
    session = declare(start=start, end=START + timedelta(minutes=90))

    assert session.start_time.tzinfo is None
    assert session.start_time == START
    assert session.end_time - session.start_time == timedelta(minutes=90)
