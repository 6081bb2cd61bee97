"""Deterministic demo data.

Five sessions across three courses, one demo checker and one demo student
with two present records and one excused absence (backed by an approved
excuse). Times are relative to ``now`` so the live session is always open.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import ApprovalStatus, AttendanceStatus
from ..excuses.model import ExcuseSubmission
from ..excuses.repository import ExcuseRepository
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from ..verification.proximity import GeoPoint

logger = logging.getLogger(__name__)

DEMO_CHECKER = "DEMOCHECKER".ljust(58, "A")
DEMO_STUDENT = "DEMOSTUDENT".ljust(58, "A")

CS_BUILDING = (40.7128, -74.0060)
MATH_HALL = (40.7589, -73.9851)
PHYSICS_LAB = (40.7505, -73.9934)


def _session(
    session_id: str,
    *,
    course_code: str,
    course_name: str,
    description: str,
    start: datetime,
    duration: timedelta,
    declared: datetime,
    coords: tuple[float, float],
    label: str,
    check_in_window: int,
    is_active: bool,
    attendee_count: int,
) -> Session:
    return Session(
        session_id=session_id,
        course_code=course_code,
        course_name=course_name,
        description=description,
        start_time=start,
        end_time=start + duration,
        created_by=DEMO_CHECKER,
        location=GeoPoint(latitude=coords[0], longitude=coords[1], label=label),
        allowed_radius=50,
        check_in_window=check_in_window,
        excuse_deadline_hours=48,
        declaration_time=declared,
        is_active=is_active,
        attendee_count=attendee_count,
        transaction_id=f"session-tx-{session_id}",
    )


def demo_sessions(now: datetime) -> list[Session]:
    day = timedelta(days=1)
    return [
        _session(
            "demo-1",
            course_code="CS101",
            course_name="Computer Science 101",
            description="Introduction to Programming",
            start=now - timedelta(minutes=30),
            duration=timedelta(minutes=120),
            declared=now - timedelta(minutes=45),
            coords=CS_BUILDING,
            label="Computer Science Building, Room 101",
            check_in_window=10,
            is_active=True,
            attendee_count=0,
        ),
        _session(
            "demo-2",
            course_code="MATH201",
            course_name="Advanced Mathematics",
            description="Advanced Calculus and Linear Algebra",
            start=now + timedelta(hours=1),
            duration=timedelta(minutes=90),
            declared=now - timedelta(minutes=15),
            coords=MATH_HALL,
            label="Mathematics Hall, Room 205",
            check_in_window=15,
            is_active=True,
            attendee_count=0,
        ),
        _session(
            "demo-3",
            course_code="PHYS301",
            course_name="Advanced Physics",
            description="Quantum Mechanics and Relativity",
            start=now - timedelta(hours=3),
            duration=timedelta(minutes=90),
            declared=now - timedelta(minutes=200),
            coords=PHYSICS_LAB,
            label="Physics Laboratory, Room 301",
            check_in_window=10,
            is_active=False,
            attendee_count=1,
        ),
        _session(
            "demo-4",
            course_code="CS101",
            course_name="Computer Science 101",
            description="Data Structures and Algorithms",
            start=now - 7 * day,
            duration=timedelta(minutes=90),
            declared=now - 7 * day - timedelta(minutes=15),
            coords=CS_BUILDING,
            label="Computer Science Building, Room 102",
            check_in_window=10,
            is_active=False,
            attendee_count=1,
        ),
        _session(
            "demo-5",
            course_code="MATH201",
            course_name="Advanced Mathematics",
            description="Differential Equations",
            start=now - 5 * day,
            duration=timedelta(minutes=90),
            declared=now - 5 * day - timedelta(minutes=15),
            coords=MATH_HALL,
            label="Mathematics Hall, Room 206",
            check_in_window=15,
            is_active=False,
            attendee_count=0,
        ),
    ]


def demo_records(now: datetime) -> list[AttendanceRecord]:
    day = timedelta(days=1)
    return [
        AttendanceRecord(
            record_id="record-1",
            session_id="demo-3",
            student_address=DEMO_STUDENT,
            timestamp=now - timedelta(hours=3) + timedelta(minutes=2),
            status=AttendanceStatus.PRESENT,
            location=GeoPoint(latitude=PHYSICS_LAB[0], longitude=PHYSICS_LAB[1]),
            location_verified=True,
            distance_from_class=15,
            check_in_attempts=1,
            transaction_id="attendance-tx-1",
        ),
        AttendanceRecord(
            record_id="record-2",
            session_id="demo-4",
            student_address=DEMO_STUDENT,
            timestamp=now - 7 * day + timedelta(minutes=3),
            status=AttendanceStatus.PRESENT,
            location=GeoPoint(latitude=CS_BUILDING[0], longitude=CS_BUILDING[1]),
            location_verified=True,
            distance_from_class=12,
            check_in_attempts=1,
            transaction_id="attendance-tx-2",
        ),
        AttendanceRecord(
            record_id="record-3",
            session_id="demo-5",
            student_address=DEMO_STUDENT,
            timestamp=now - 4 * day,
            status=AttendanceStatus.EXCUSED,
            location=None,
            location_verified=False,
            distance_from_class=0,
            check_in_attempts=0,
            transaction_id="excused-tx-1",
        ),
    ]


def demo_excuses(now: datetime) -> list[ExcuseSubmission]:
    submitted = now - timedelta(days=4)
    return [
        ExcuseSubmission(
            excuse_id="excuse-1",
            session_id="demo-5",
            student_address=DEMO_STUDENT,
            reason="Medical appointment - had to visit the doctor for a scheduled check-up",
            submission_time=submitted,
            approval_status=ApprovalStatus.APPROVED,
            is_within_deadline=True,
            transaction_id="excuse-tx-1",
            reviewed_by=DEMO_CHECKER,
            review_time=submitted + timedelta(hours=2),
            review_notes="Valid medical excuse with documentation provided.",
        )
    ]


def seed_demo_data(
    sessions: SessionRepository,
    attendance: AttendanceRepository,
    excuses: ExcuseRepository,
    *,
    now: datetime | None = None,
) -> bool:
    """Load the demo data set. Returns False when it is already present."""
    now = now or now_local()
    if sessions.get_by_id("demo-1"):
        return False

    for session in demo_sessions(now):
        sessions.add(session)
    for record in demo_records(now):
        attendance.add(record)
    for excuse in demo_excuses(now):
        pending = replace(
            excuse,
            approval_status=ApprovalStatus.PENDING,
            reviewed_by=None,
            review_time=None,
            review_notes=None,
        )
        excuses.add(pending)
        if excuse.approval_status != ApprovalStatus.PENDING:
            excuses.decide(
                excuse_id=excuse.excuse_id,
                status=excuse.approval_status,
                reviewed_by=excuse.reviewed_by or DEMO_CHECKER,
                review_time=excuse.review_time or now,
                review_notes=excuse.review_notes,
            )

    logger.info("Demo data seeded (checker %s, student %s)", DEMO_CHECKER, DEMO_STUDENT)
    return True
