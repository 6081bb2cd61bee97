from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_address: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def add(self, record: AttendanceRecord) -> None:
        """Insert a record; raises DuplicateKeyError if (session, student) is taken."""

        raise NotImplementedError

    def update_status(self, record_id: str, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    # Rejected attempts are counted, never stored as records.
    def increment_attempts(self, session_id: str, student_address: str) -> int:
        raise NotImplementedError

    def get_attempts(self, session_id: str, student_address: str) -> int:
        raise NotImplementedError
