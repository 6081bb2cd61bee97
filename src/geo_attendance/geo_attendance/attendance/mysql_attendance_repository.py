from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..verification.proximity import GeoPoint
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, session_id, student_address, recorded_at, status,
    location_latitude, location_longitude, location_verified,
    distance_from_class, check_in_attempts, transaction_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    location = None
    if r.get("location_latitude") is not None and r.get("location_longitude") is not None:
        location = GeoPoint(latitude=float(r["location_latitude"]), longitude=float(r["location_longitude"]))
    return AttendanceRecord(
        record_id=str(r["record_id"]),
        session_id=str(r["session_id"]),
        student_address=r["student_address"],
        timestamp=r["recorded_at"],
        status=AttendanceStatus(r["status"]),
        location=location,
        location_verified=bool(r["location_verified"]),
        distance_from_class=int(r["distance_from_class"]),
        check_in_attempts=int(r["check_in_attempts"]),
        transaction_id=r["transaction_id"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s AND student_address=%s",
                (session_id, student_address),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY recorded_at DESC",
                (session_id,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_address: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_address=%s ORDER BY recorded_at DESC",
                (student_address,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def add(self, record: AttendanceRecord) -> None:
        # uq_records_session_student turns a concurrent duplicate into DuplicateKeyError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    record_id, session_id, student_address, recorded_at, status,
                    location_latitude, location_longitude, location_verified,
                    distance_from_class, check_in_attempts, transaction_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.record_id,
                    record.session_id,
                    record.student_address,
                    record.timestamp,
                    record.status.value,
                    record.location.latitude if record.location else None,
                    record.location.longitude if record.location else None,
                    int(record.location_verified),
                    int(record.distance_from_class),
                    int(record.check_in_attempts),
                    record.transaction_id,
                ),
            )

    def update_status(self, record_id: str, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_records SET status=%s WHERE record_id=%s", (status.value, record_id))
            return cur.rowcount > 0

    def increment_attempts(self, session_id: str, student_address: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO checkin_attempts(session_id, student_address, attempts)
                VALUES(%s,%s,1)
                ON DUPLICATE KEY UPDATE attempts = attempts + 1
                """,
                (session_id, student_address),
            )
            cur.execute(
                "SELECT attempts FROM checkin_attempts WHERE session_id=%s AND student_address=%s",
                (session_id, student_address),
            )
            r = fetchone(cur)
            return int(r["attempts"]) if r else 0

    def get_attempts(self, session_id: str, student_address: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT attempts FROM checkin_attempts WHERE session_id=%s AND student_address=%s",
                (session_id, student_address),
            )
            r = fetchone(cur)
            return int(r["attempts"]) if r else 0
