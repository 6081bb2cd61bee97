from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.locks import KeyedLock
from .core.constants import (
    DEFAULT_ALLOWED_RADIUS_METERS,
    DEFAULT_CHECK_IN_WINDOW_MINUTES,
    DEFAULT_EXCUSE_DEADLINE_HOURS,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    REQUIRED_ATTENDANCE_PERCENTAGE,
)
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .database.memory import InMemoryStore
from .excuses.mysql_excuse_repository import MySQLExcuseRepository
from .excuses.repository import ExcuseRepository
from .excuses.service import ExcuseService
from .providers.geolocation import GeolocationProvider
from .providers.identity import HeaderIdentityProvider, IdentityProvider
from .reports.calculator.standard_calculator import StandardEligibilityCalculator
from .reports.service import AttendanceReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService


@dataclass(frozen=True)
class Container:
    backend: str
    conn: Optional[DatabaseConnection]

    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository
    excuses_repo: ExcuseRepository

    locks: KeyedLock
    identity: IdentityProvider

    session_service: SessionService
    attendance_service: AttendanceService
    excuse_service: ExcuseService
    report_service: AttendanceReportService


def build_container(
    *,
    settings: Any = None,
    identity: Optional[IdentityProvider] = None,
    geolocation: Optional[GeolocationProvider] = None,
) -> Container:
    """Wire repositories and services from a settings module (or any object with the same attributes)."""
    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()

    conn: Optional[DatabaseConnection] = None
    if backend == "memory":
        store = InMemoryStore()
        sessions_repo: SessionRepository = store.sessions
        attendance_repo: AttendanceRepository = store.attendance
        excuses_repo: ExcuseRepository = store.excuses
    elif backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG")))
        sessions_repo = MySQLSessionRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
        excuses_repo = MySQLExcuseRepository(conn)
    else:
        raise ValidationError(f"Unknown STORE_BACKEND: {backend}")

    locks = KeyedLock()
    identity = identity or HeaderIdentityProvider()

    session_service = SessionService(
        sessions_repo,
        default_radius=int(getattr(settings, "DEFAULT_ALLOWED_RADIUS_METERS", DEFAULT_ALLOWED_RADIUS_METERS)),
        default_window=int(getattr(settings, "DEFAULT_CHECK_IN_WINDOW_MINUTES", DEFAULT_CHECK_IN_WINDOW_MINUTES)),
        default_deadline_hours=int(getattr(settings, "DEFAULT_EXCUSE_DEADLINE_HOURS", DEFAULT_EXCUSE_DEADLINE_HOURS)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        sessions_repo,
        locks=locks,
        strategy_factory=AttendanceStrategyFactory(
            late_threshold_minutes=int(getattr(settings, "LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
        ),
        identity=identity,
        geolocation=geolocation,
    )
    excuse_service = ExcuseService(excuses_repo, sessions_repo, attendance_service, locks=locks)
    report_service = AttendanceReportService(
        sessions_repo,
        attendance_repo,
        calculator=StandardEligibilityCalculator(
            required_percentage=float(
                getattr(settings, "REQUIRED_ATTENDANCE_PERCENTAGE", REQUIRED_ATTENDANCE_PERCENTAGE)
            ),
        ),
    )

    return Container(
        backend=backend,
        conn=conn,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        excuses_repo=excuses_repo,
        locks=locks,
        identity=identity,
        session_service=session_service,
        attendance_service=attendance_service,
        excuse_service=excuse_service,
        report_service=report_service,
    )
