from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import ExcuseSubmission


class ExcuseRepository(Protocol):
    def add(self, excuse: ExcuseSubmission) -> None:
        """Insert an excuse; raises DuplicateKeyError if (session, student) is taken."""

        raise NotImplementedError

    def get_by_id(self, excuse_id: str) -> Optional[ExcuseSubmission]:
        raise NotImplementedError

    def get_for_session_and_student(self, session_id: str, student_address: str) -> Optional[ExcuseSubmission]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[ExcuseSubmission]:
        raise NotImplementedError

    def list_for_student(self, student_address: str) -> Sequence[ExcuseSubmission]:
        raise NotImplementedError

    def list_for_sessions(
        self,
        session_ids: Iterable[str],
        *,
        status: Optional[ApprovalStatus] = None,
    ) -> Sequence[ExcuseSubmission]:
        raise NotImplementedError

    def decide(
        self,
        *,
        excuse_id: str,
        status: ApprovalStatus,
        reviewed_by: str,
        review_time: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        """Apply a review only if the excuse is still pending; False otherwise."""

        raise NotImplementedError

    def reopen(self, excuse_id: str) -> bool:
        """Return a reviewed excuse to pending and clear its review fields."""

        raise NotImplementedError
