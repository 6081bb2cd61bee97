from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.ids import new_id, new_reference
from ..common.locks import KeyedLock
from ..core.enums import AttendanceStatus, RejectionCode
from ..core.exceptions import (
    AuthorizationError,
    CheckInRejected,
    DuplicateKeyError,
    LocationUnavailable,
    NotFoundError,
    Rejection,
)
from ..providers.geolocation import GeolocationProvider
from ..providers.identity import IdentityProvider
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from ..verification.proximity import GeoPoint
from ..verification.validator import CheckInValidator, VeracityCheck
from .factory import AttendanceStrategyFactory, ensure_transition
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        *,
        locks: KeyedLock | None = None,
        validator: CheckInValidator | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        identity: IdentityProvider | None = None,
        geolocation: GeolocationProvider | None = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._locks = locks or KeyedLock()
        self._validator = validator or CheckInValidator()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._identity = identity
        self._geolocation = geolocation

    def _get_session(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def _existing(self, session_id: str, student_address: str) -> list[AttendanceRecord]:
        record = self._attendance.get_for_session_and_student(session_id, student_address)
        return [record] if record else []

    def verify(
        self,
        *,
        session_id: str,
        student_address: str,
        location: GeoPoint,
        now: datetime | None = None,
    ) -> VeracityCheck:
        """Run the veracity check without writing anything."""
        now = now or now_local()
        session = self._get_session(session_id)
        return self._validator.check(
            session=session,
            student_address=student_address,
            location=location,
            existing_records=self._existing(session_id, student_address),
            now=now,
        )

    def check_in(
        self,
        *,
        session_id: str,
        student_address: str,
        location: GeoPoint,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        session = self._get_session(session_id)

        with self._locks.hold((session_id, student_address)):
            check = self._validator.check(
                session=session,
                student_address=student_address,
                location=location,
                existing_records=self._existing(session_id, student_address),
                now=now,
            )
            if not check.overall_valid:
                attempts = self._attendance.increment_attempts(session_id, student_address)
                logger.info(
                    "Check-in rejected for session %s (attempt %d): %s",
                    session_id,
                    attempts,
                    ", ".join(r.code.value for r in check.reasons),
                )
                raise CheckInRejected(check.reasons)

            strategy = self._factory.for_checkin(now=now, session=session)
            decision = strategy.decide_checkin(
                now=now,
                session=session,
                late_threshold_minutes=self._factory.late_threshold_minutes,
            )
            ensure_transition(None, decision.status)

            record = AttendanceRecord(
                record_id=new_id(),
                session_id=session_id,
                student_address=student_address,
                timestamp=now,
                status=decision.status,
                location=GeoPoint(latitude=location.latitude, longitude=location.longitude),
                location_verified=check.location_match,
                distance_from_class=check.distance_meters,
                check_in_attempts=self._attendance.get_attempts(session_id, student_address) + 1,
                transaction_id=new_reference("attendance"),
            )
            try:
                self._attendance.add(record)
            except DuplicateKeyError:
                self._attendance.increment_attempts(session_id, student_address)
                raise CheckInRejected(
                    [Rejection(RejectionCode.DUPLICATE_CHECK_IN, "You have already checked in for this session.")]
                )
            self._sessions.increment_attendee_count(session_id)

        logger.info(
            "Check-in accepted for session %s: %s, %dm%s",
            session_id,
            record.status.value,
            record.distance_from_class,
            f" ({decision.note})" if decision.note else "",
        )
        return record

    def check_in_with_device(self, *, session_id: str, now: datetime | None = None) -> AttendanceRecord:
        """Check in the connected wallet at the device's current location."""
        if self._identity is None or self._geolocation is None:
            raise AuthorizationError("No wallet or location provider configured")

        student_address = self._identity.current_identity()
        if not student_address:
            raise AuthorizationError("No wallet connected")

        try:
            location = self._geolocation.current_location()
        except LocationUnavailable as e:
            logger.warning("Location unavailable for session %s: %s", session_id, e)
            raise

        return self.check_in(session_id=session_id, student_address=student_address, location=location, now=now)

    def apply_excuse_approval(
        self,
        *,
        session_id: str,
        student_address: str,
        submission_time: datetime,
    ) -> AttendanceRecord:
        """Mark the (session, student) pair excused.

        An existing record only has its status changed. Without one, an
        excused record is synthesized: no location, distance 0, zero attempts.
        """
        with self._locks.hold((session_id, student_address)):
            existing = self._attendance.get_for_session_and_student(session_id, student_address)
            current: Optional[AttendanceStatus] = existing.status if existing else None

            decision = self._factory.for_excuse_approval(current=current).decide_excuse_approval(current=current)
            ensure_transition(current, decision.status)

            if existing:
                self._attendance.update_status(existing.record_id, decision.status)
                return replace(existing, status=decision.status)

            record = AttendanceRecord(
                record_id=new_id(),
                session_id=session_id,
                student_address=student_address,
                timestamp=submission_time,
                status=decision.status,
                location=None,
                location_verified=False,
                distance_from_class=0,
                check_in_attempts=0,
                transaction_id=new_reference("excused"),
            )
            self._attendance.add(record)
            return record

    def record_for(self, session_id: str, student_address: str) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_session_and_student(session_id, student_address)

    def session_records(self, session_id: str) -> Sequence[AttendanceRecord]:
        rows = list(self._attendance.list_for_session(session_id))
        rows.sort(key=lambda r: r.timestamp, reverse=True)
        return rows

    def student_history(self, student_address: str) -> Sequence[AttendanceRecord]:
        rows = list(self._attendance.list_for_student(student_address))
        rows.sort(key=lambda r: r.timestamp, reverse=True)
        return rows
