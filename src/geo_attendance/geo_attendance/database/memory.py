"""In-memory event store.

Implements the session, attendance and excuse repository protocols over plain
dicts guarded by one re-entrant lock. Reads return copies of the underlying
lists so reporting always works on a consistent snapshot.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import ApprovalStatus, AttendanceStatus
from ..core.exceptions import DuplicateKeyError
from ..excuses.model import ExcuseSubmission
from ..excuses.repository import ExcuseRepository
from ..sessions.model import Session
from ..sessions.repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._by_id: dict[str, Session] = {}

    def add(self, session: Session) -> None:
        with self._lock:
            if session.session_id in self._by_id:
                raise DuplicateKeyError(f"Session {session.session_id} already exists")
            self._by_id[session.session_id] = session

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._by_id.get(session_id)

    def list_all(self) -> Sequence[Session]:
        with self._lock:
            return list(self._by_id.values())

    def list_active(self) -> Sequence[Session]:
        with self._lock:
            return [s for s in self._by_id.values() if s.is_active]

    def list_by_creator(self, created_by: str) -> Sequence[Session]:
        with self._lock:
            return [s for s in self._by_id.values() if s.created_by == created_by]

    def list_by_course(self, course_code: str) -> Sequence[Session]:
        with self._lock:
            return [s for s in self._by_id.values() if s.course_code == course_code]

    def set_active(self, session_id: str, is_active: bool) -> bool:
        with self._lock:
            session = self._by_id.get(session_id)
            if not session:
                return False
            self._by_id[session_id] = replace(session, is_active=is_active)
            return True

    def increment_attendee_count(self, session_id: str) -> bool:
        with self._lock:
            session = self._by_id.get(session_id)
            if not session:
                return False
            self._by_id[session_id] = replace(session, attendee_count=session.attendee_count + 1)
            return True


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._by_key: dict[tuple[str, str], AttendanceRecord] = {}
        self._attempts: dict[tuple[str, str], int] = {}

    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_key.get((session_id, student_address))

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self._by_key.values() if r.session_id == session_id]

    def list_for_student(self, student_address: str) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self._by_key.values() if r.student_address == student_address]

    def add(self, record: AttendanceRecord) -> None:
        key = (record.session_id, record.student_address)
        with self._lock:
            if key in self._by_key:
                raise DuplicateKeyError(
                    f"Attendance for session {record.session_id} and {record.student_address} already exists"
                )
            self._by_key[key] = record

    def update_status(self, record_id: str, status: AttendanceStatus) -> bool:
        with self._lock:
            for key, record in self._by_key.items():
                if record.record_id == record_id:
                    self._by_key[key] = replace(record, status=status)
                    return True
            return False

    def increment_attempts(self, session_id: str, student_address: str) -> int:
        key = (session_id, student_address)
        with self._lock:
            self._attempts[key] = self._attempts.get(key, 0) + 1
            return self._attempts[key]

    def get_attempts(self, session_id: str, student_address: str) -> int:
        with self._lock:
            return self._attempts.get((session_id, student_address), 0)


class InMemoryExcuseRepository(ExcuseRepository):
    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._by_id: dict[str, ExcuseSubmission] = {}
        self._key_index: dict[tuple[str, str], str] = {}

    def add(self, excuse: ExcuseSubmission) -> None:
        key = (excuse.session_id, excuse.student_address)
        with self._lock:
            if key in self._key_index:
                raise DuplicateKeyError(
                    f"Excuse for session {excuse.session_id} and {excuse.student_address} already exists"
                )
            self._by_id[excuse.excuse_id] = excuse
            self._key_index[key] = excuse.excuse_id

    def get_by_id(self, excuse_id: str) -> Optional[ExcuseSubmission]:
        with self._lock:
            return self._by_id.get(excuse_id)

    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[ExcuseSubmission]:
        with self._lock:
            excuse_id = self._key_index.get((session_id, student_address))
            return self._by_id.get(excuse_id) if excuse_id else None

    def list_for_session(self, session_id: str) -> Sequence[ExcuseSubmission]:
        with self._lock:
            return [e for e in self._by_id.values() if e.session_id == session_id]

    def list_for_student(self, student_address: str) -> Sequence[ExcuseSubmission]:
        with self._lock:
            return [e for e in self._by_id.values() if e.student_address == student_address]

    def list_for_sessions(
        self,
        session_ids: Iterable[str],
        *,
        status: Optional[ApprovalStatus] = None,
    ) -> Sequence[ExcuseSubmission]:
        wanted = set(session_ids)
        with self._lock:
            return [
                e
                for e in self._by_id.values()
                if e.session_id in wanted and (status is None or e.approval_status == status)
            ]

    def decide(
        self,
        *,
        excuse_id: str,
        status: ApprovalStatus,
        reviewed_by: str,
        review_time: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        with self._lock:
            excuse = self._by_id.get(excuse_id)
            if not excuse or excuse.approval_status != ApprovalStatus.PENDING:
                return False
            self._by_id[excuse_id] = replace(
                excuse,
                approval_status=status,
                reviewed_by=reviewed_by,
                review_time=review_time,
                review_notes=review_notes,
            )
            return True

    def reopen(self, excuse_id: str) -> bool:
        with self._lock:
            excuse = self._by_id.get(excuse_id)
            if not excuse or excuse.approval_status == ApprovalStatus.PENDING:
                return False
            self._by_id[excuse_id] = replace(
                excuse,
                approval_status=ApprovalStatus.PENDING,
                reviewed_by=None,
                review_time=None,
                review_notes=None,
            )
            return True


@dataclass
class InMemoryStore:
    """The three repositories sharing one lock."""

    lock: threading.RLock = field(default_factory=threading.RLock)
    sessions: InMemorySessionRepository = field(init=False)
    attendance: InMemoryAttendanceRepository = field(init=False)
    excuses: InMemoryExcuseRepository = field(init=False)

    def __post_init__(self) -> None:
        self.sessions = InMemorySessionRepository(self.lock)
        self.attendance = InMemoryAttendanceRepository(self.lock)
        self.excuses = InMemoryExcuseRepository(self.lock)
