from datetime import timedelta

import pytest

from geo_attendance.attendance.factory import AttendanceStrategyFactory, ensure_transition
from geo_attendance.attendance.strategies.excused_strategy import ExcusedStrategy
from geo_attendance.attendance.strategies.late_strategy import LateStrategy
from geo_attendance.attendance.strategies.present_strategy import PresentStrategy
from geo_attendance.core.enums import AttendanceStatus
from geo_attendance.core.exceptions import ValidationError

from conftest import START


def test_factory_checkin_present_within_threshold(session):
    now = START + timedelta(minutes=4, seconds=59)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, session=session)

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_after_threshold(session):
    now = START + timedelta(minutes=6)

    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=now, session=session)
    decision = strategy.decide_checkin(now=now, session=session, late_threshold_minutes=factory.late_threshold_minutes)

    assert isinstance(strategy, LateStrategy)
    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Checked in 6 min after start"


def test_factory_respects_custom_threshold(session):
    now = START + timedelta(minutes=6)
    assert isinstance(AttendanceStrategyFactory(late_threshold_minutes=8).for_checkin(now=now, session=session), PresentStrategy)


def test_factory_excuse_approval():
    strategy = AttendanceStrategyFactory().for_excuse_approval(current=AttendanceStatus.ABSENT)
    decision = strategy.decide_excuse_approval(current=AttendanceStatus.ABSENT)

    assert isinstance(strategy, ExcusedStrategy)
    assert decision.status == AttendanceStatus.EXCUSED
    assert decision.note == "Overrides absent"


def test_factory_refuses_to_excuse_twice():
    with pytest.raises(ValidationError):
        AttendanceStrategyFactory().for_excuse_approval(current=AttendanceStatus.EXCUSED)


@pytest.mark.parametrize(
    "current,target",
    [
        (None, AttendanceStatus.PRESENT),
        (None, AttendanceStatus.EXCUSED),
        (AttendanceStatus.LATE, AttendanceStatus.EXCUSED),
        (AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED),
    ],
)
def test_allowed_transitions(current, target):
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (None, AttendanceStatus.ABSENT),
        (AttendanceStatus.PRESENT, AttendanceStatus.LATE),
        (AttendanceStatus.EXCUSED, AttendanceStatus.PRESENT),
        (AttendanceStatus.EXCUSED, AttendanceStatus.EXCUSED),
    ],
)
def test_forbidden_transitions(current, target):
    with pytest.raises(ValidationError):
        ensure_transition(current, target)
