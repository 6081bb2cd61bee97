from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..verification.proximity import GeoPoint
from .model import Session
from .repository import SessionRepository

_COLUMNS = """
    session_id, course_code, course_name, description, start_time, end_time, created_by,
    location_latitude, location_longitude, location_address,
    allowed_radius, check_in_window, excuse_deadline_hours,
    declaration_time, is_active, attendee_count, transaction_id
"""


def _row_to_session(r: dict) -> Session:
    return Session(
        session_id=str(r["session_id"]),
        course_code=r["course_code"],
        course_name=r["course_name"],
        description=r.get("description") or "",
        start_time=r["start_time"],
        end_time=r["end_time"],
        created_by=r["created_by"],
        location=GeoPoint(
            latitude=float(r["location_latitude"]),
            longitude=float(r["location_longitude"]),
            label=r.get("location_address"),
        ),
        allowed_radius=int(r["allowed_radius"]),
        check_in_window=int(r["check_in_window"]),
        excuse_deadline_hours=int(r["excuse_deadline_hours"]),
        declaration_time=r["declaration_time"],
        is_active=bool(r["is_active"]),
        attendee_count=int(r["attendee_count"]),
        transaction_id=r.get("transaction_id"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, session: Session) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    session_id, course_code, course_name, description, start_time, end_time, created_by,
                    location_latitude, location_longitude, location_address,
                    allowed_radius, check_in_window, excuse_deadline_hours,
                    declaration_time, is_active, attendee_count, transaction_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    session.course_code,
                    session.course_name,
                    session.description,
                    session.start_time,
                    session.end_time,
                    session.created_by,
                    session.location.latitude,
                    session.location.longitude,
                    session.location.label,
                    session.allowed_radius,
                    session.check_in_window,
                    session.excuse_deadline_hours,
                    session.declaration_time,
                    int(session.is_active),
                    session.attendee_count,
                    session.transaction_id,
                ),
            )

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def _list(self, where: str = "1=1", params: tuple = ()) -> Sequence[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where} ORDER BY seq", params)
            return [_row_to_session(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Session]:
        return self._list()

    def list_active(self) -> Sequence[Session]:
        return self._list("is_active=1")

    def list_by_creator(self, created_by: str) -> Sequence[Session]:
        return self._list("created_by=%s", (created_by,))

    def list_by_course(self, course_code: str) -> Sequence[Session]:
        return self._list("course_code=%s", (course_code,))

    def set_active(self, session_id: str, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET is_active=%s WHERE session_id=%s",
                (int(is_active), session_id),
            )
            return cur.rowcount > 0

    def increment_attendee_count(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET attendee_count = attendee_count + 1 WHERE session_id=%s",
                (session_id,),
            )
            return cur.rowcount > 0
