from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import ExcuseSubmission
from .repository import ExcuseRepository

_COLUMNS = """
    excuse_id, session_id, student_address, reason, submission_time, approval_status,
    is_within_deadline, transaction_id, reviewed_by, review_time, review_notes
"""


def _row_to_excuse(r: dict) -> ExcuseSubmission:
    return ExcuseSubmission(
        excuse_id=str(r["excuse_id"]),
        session_id=str(r["session_id"]),
        student_address=r["student_address"],
        reason=r["reason"],
        submission_time=r["submission_time"],
        approval_status=ApprovalStatus(r["approval_status"]),
        is_within_deadline=bool(r["is_within_deadline"]),
        transaction_id=r["transaction_id"],
        reviewed_by=r.get("reviewed_by"),
        review_time=r.get("review_time"),
        review_notes=r.get("review_notes"),
    )


class MySQLExcuseRepository(ExcuseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, excuse: ExcuseSubmission) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO excuse_submissions(
                    excuse_id, session_id, student_address, reason, submission_time,
                    approval_status, is_within_deadline, transaction_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    excuse.excuse_id,
                    excuse.session_id,
                    excuse.student_address,
                    excuse.reason,
                    excuse.submission_time,
                    excuse.approval_status.value,
                    int(excuse.is_within_deadline),
                    excuse.transaction_id,
                ),
            )

    def get_by_id(self, excuse_id: str) -> Optional[ExcuseSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM excuse_submissions WHERE excuse_id=%s", (excuse_id,))
            r = fetchone(cur)
            return _row_to_excuse(r) if r else None

    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[ExcuseSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM excuse_submissions WHERE session_id=%s AND student_address=%s",
                (session_id, student_address),
            )
            r = fetchone(cur)
            return _row_to_excuse(r) if r else None

    def list_for_session(self, session_id: str) -> Sequence[ExcuseSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM excuse_submissions WHERE session_id=%s ORDER BY submission_time DESC",
                (session_id,),
            )
            return [_row_to_excuse(r) for r in fetchall(cur)]

    def list_for_student(self, student_address: str) -> Sequence[ExcuseSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM excuse_submissions WHERE student_address=%s ORDER BY submission_time DESC",
                (student_address,),
            )
            return [_row_to_excuse(r) for r in fetchall(cur)]

    def list_for_sessions(
        self,
        session_ids: Iterable[str],
        *,
        status: Optional[ApprovalStatus] = None,
    ) -> Sequence[ExcuseSubmission]:
        ids = list(session_ids)
        if not ids:
            return []

        clauses = [f"session_id IN ({in_clause(ids)})"]
        params: list[object] = list(ids)
        if status is not None:
            clauses.append("approval_status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM excuse_submissions WHERE {where} ORDER BY submission_time",
                tuple(params),
            )
            return [_row_to_excuse(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        excuse_id: str,
        status: ApprovalStatus,
        reviewed_by: str,
        review_time: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        # Conditional on 'pending': of two racing reviews only one updates a row.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE excuse_submissions
                SET approval_status=%s, reviewed_by=%s, review_time=%s, review_notes=%s
                WHERE excuse_id=%s AND approval_status=%s
                """,
                (status.value, reviewed_by, review_time, review_notes, excuse_id, ApprovalStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def reopen(self, excuse_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE excuse_submissions
                SET approval_status=%s, reviewed_by=NULL, review_time=NULL, review_notes=NULL
                WHERE excuse_id=%s AND approval_status<>%s
                """,
                (ApprovalStatus.PENDING.value, excuse_id, ApprovalStatus.PENDING.value),
            )
            return cur.rowcount > 0
