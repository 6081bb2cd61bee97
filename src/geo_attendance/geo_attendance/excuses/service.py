from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.ids import new_id, new_reference
from ..common.locks import KeyedLock
from ..core.enums import ApprovalStatus, AttendanceStatus, RejectionCode
from ..core.exceptions import (
    AuthorizationError,
    DuplicateKeyError,
    ExcuseRejected,
    NotFoundError,
    Rejection,
    ReviewRejected,
    ValidationError,
)
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from ..verification.window import excuse_window_open, within_excuse_deadline
from .model import ExcuseSubmission
from .repository import ExcuseRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExcuseReview:
    excuse: ExcuseSubmission
    record: Optional[AttendanceRecord] = None


class ExcuseService:
    def __init__(
        self,
        excuses: ExcuseRepository,
        sessions: SessionRepository,
        attendance: AttendanceService,
        *,
        locks: KeyedLock | None = None,
    ):
        self._excuses = excuses
        self._sessions = sessions
        self._attendance = attendance
        self._locks = locks or KeyedLock()

    def _get_session(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def _submission_problems(
        self,
        *,
        session: Session,
        student_address: str,
        reason: str,
        now: datetime,
    ) -> list[Rejection]:
        problems: list[Rejection] = []

        if not excuse_window_open(now, session.end_time):
            problems.append(
                Rejection(
                    RejectionCode.EXCUSE_NOT_OPEN,
                    "Excuses can only be submitted after the session has ended.",
                )
            )

        record = self._attendance.record_for(session.session_id, student_address)
        if record and record.status != AttendanceStatus.ABSENT:
            problems.append(Rejection(RejectionCode.ALREADY_ATTENDED, "You have already attended this session."))

        if self._excuses.get_for_session_and_student(session.session_id, student_address):
            problems.append(
                Rejection(RejectionCode.DUPLICATE_EXCUSE, "You have already submitted an excuse for this session.")
            )

        if not within_excuse_deadline(now, session.end_time, session.excuse_deadline_hours):
            problems.append(
                Rejection(
                    RejectionCode.DEADLINE_PASSED,
                    "Excuse submission deadline has passed. "
                    f"You had {session.excuse_deadline_hours} hours after the session ended.",
                )
            )

        if not reason or not reason.strip():
            problems.append(Rejection(RejectionCode.EMPTY_REASON, "Please give a reason for your absence."))

        return problems

    def can_submit(self, *, session_id: str, student_address: str, now: datetime | None = None) -> bool:
        session = self._sessions.get_by_id(session_id)
        if not session or not student_address:
            return False
        problems = self._submission_problems(
            session=session,
            student_address=student_address,
            reason="-",
            now=now or now_local(),
        )
        return not problems

    def submit(
        self,
        *,
        session_id: str,
        student_address: str,
        reason: str,
        now: datetime | None = None,
    ) -> ExcuseSubmission:
        now = now or now_local()
        if not student_address:
            raise AuthorizationError("No wallet connected")
        session = self._get_session(session_id)

        with self._locks.hold((session_id, student_address)):
            problems = self._submission_problems(
                session=session,
                student_address=student_address,
                reason=reason,
                now=now,
            )
            if problems:
                logger.info(
                    "Excuse rejected for session %s: %s",
                    session_id,
                    ", ".join(p.code.value for p in problems),
                )
                raise ExcuseRejected(problems)

            excuse = ExcuseSubmission(
                excuse_id=new_id(),
                session_id=session_id,
                student_address=student_address,
                reason=reason.strip(),
                submission_time=now,
                approval_status=ApprovalStatus.PENDING,
                # Always true once accepted; kept as an audit field.
                is_within_deadline=True,
                transaction_id=new_reference("excuse"),
            )
            try:
                self._excuses.add(excuse)
            except DuplicateKeyError:
                raise ExcuseRejected(
                    [Rejection(RejectionCode.DUPLICATE_EXCUSE, "You have already submitted an excuse for this session.")]
                )

        logger.info("Excuse %s submitted for session %s", excuse.excuse_id, session_id)
        return excuse

    def review(
        self,
        *,
        reviewer: str,
        excuse_id: str,
        status: ApprovalStatus,
        review_notes: str = "",
        now: datetime | None = None,
    ) -> ExcuseReview:
        now = now or now_local()
        if status not in {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}:
            raise ValidationError("Review status must be approved or rejected")

        excuse = self._excuses.get_by_id(excuse_id)
        if not excuse:
            raise NotFoundError("Excuse not found")
        session = self._get_session(excuse.session_id)

        with self._locks.hold((excuse.session_id, excuse.student_address)):
            excuse = self._excuses.get_by_id(excuse_id) or excuse

            problems: list[Rejection] = []
            if not excuse.is_pending:
                problems.append(Rejection(RejectionCode.ALREADY_REVIEWED, "This excuse has already been reviewed."))
            if session.created_by != reviewer:
                problems.append(Rejection(RejectionCode.NOT_AUTHORIZED, "Only the class checker can review excuses."))
            if problems:
                logger.info(
                    "Review of excuse %s rejected: %s",
                    excuse_id,
                    ", ".join(p.code.value for p in problems),
                )
                raise ReviewRejected(problems)

            decided = self._excuses.decide(
                excuse_id=excuse_id,
                status=status,
                reviewed_by=reviewer,
                review_time=now,
                review_notes=(review_notes or "").strip() or None,
            )
            if not decided:
                raise ReviewRejected(
                    [Rejection(RejectionCode.ALREADY_REVIEWED, "This excuse has already been reviewed.")]
                )

            record = None
            if status == ApprovalStatus.APPROVED:
                try:
                    record = self._attendance.apply_excuse_approval(
                        session_id=excuse.session_id,
                        student_address=excuse.student_address,
                        submission_time=excuse.submission_time,
                    )
                except Exception:
                    # Approval and the excused record land together or not at all.
                    self._excuses.reopen(excuse_id)
                    logger.warning("Excuse %s returned to pending: attendance update failed", excuse_id)
                    raise

        logger.info("Excuse %s %s by %s", excuse_id, status.value, reviewer)
        return ExcuseReview(excuse=self._excuses.get_by_id(excuse_id) or excuse, record=record)

    def approve(self, *, reviewer: str, excuse_id: str, review_notes: str = "", now: datetime | None = None) -> ExcuseReview:
        return self.review(
            reviewer=reviewer,
            excuse_id=excuse_id,
            status=ApprovalStatus.APPROVED,
            review_notes=review_notes,
            now=now,
        )

    def reject(self, *, reviewer: str, excuse_id: str, review_notes: str = "", now: datetime | None = None) -> ExcuseReview:
        return self.review(
            reviewer=reviewer,
            excuse_id=excuse_id,
            status=ApprovalStatus.REJECTED,
            review_notes=review_notes,
            now=now,
        )

    def list_for_session(self, session_id: str) -> Sequence[ExcuseSubmission]:
        rows = list(self._excuses.list_for_session(session_id))
        rows.sort(key=lambda e: e.submission_time, reverse=True)
        return rows

    def list_for_student(self, student_address: str) -> Sequence[ExcuseSubmission]:
        rows = list(self._excuses.list_for_student(student_address))
        rows.sort(key=lambda e: e.submission_time, reverse=True)
        return rows

    def list_pending_for_reviewer(self, reviewer: str) -> Sequence[ExcuseSubmission]:
        session_ids = [s.session_id for s in self._sessions.list_by_creator(reviewer)]
        if not session_ids:
            return []
        rows = list(self._excuses.list_for_sessions(session_ids, status=ApprovalStatus.PENDING))
        rows.sort(key=lambda e: e.submission_time)
        return rows
