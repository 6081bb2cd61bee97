from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from geo_attendance.config import testing
from geo_attendance.container import build_container
from geo_attendance.sessions.model import NewSession
from geo_attendance.verification.proximity import GeoPoint

CHECKER = "CHECKER".ljust(58, "A")
OTHER_CHECKER = "OTHERCHECKER".ljust(58, "B")
STUDENT = "STUDENT".ljust(58, "A")
OTHER_STUDENT = "OTHERSTUDENT".ljust(58, "C")

VENUE = GeoPoint(latitude=40.7128, longitude=-74.0060, label="Computer Science Building, Room 101")
START = datetime(2026, 3, 2, 9, 0, 0)
END = START + timedelta(minutes=90)


def north_of(point: GeoPoint, meters: float) -> GeoPoint:
    """A point ``meters`` due north of ``point`` on the haversine sphere."""
    return GeoPoint(latitude=point.latitude + math.degrees(meters / 6_371_000), longitude=point.longitude)


@pytest.fixture
def container():
    return build_container(settings=testing)


@pytest.fixture
def declare(container):
    def _declare(
        *,
        course_code: str = "CS101",
        course_name: str = "Computer Science 101",
        start: datetime = START,
        end: datetime | None = None,
        creator: str = CHECKER,
        **overrides,
    ):
        data = NewSession(
            course_code=course_code,
            course_name=course_name,
            start_time=start,
            end_time=end or start + timedelta(minutes=90),
            location=overrides.pop("location", VENUE),
            **overrides,
        )
        return container.session_service.declare(creator=creator, data=data, now=start - timedelta(hours=1))

    return _declare


@pytest.fixture
def session(declare):
    return declare()
