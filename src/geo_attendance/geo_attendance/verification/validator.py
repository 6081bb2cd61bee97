"""Veracity check for a check-in attempt.

Location, time window, duplicate and identity checks are all evaluated; each
failure adds its own Rejection so a student sees every unmet condition at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from ..common.validators import is_plausible_identity
from ..core.enums import RejectionCode
from ..core.exceptions import Rejection
from .proximity import GeoPoint, within_radius
from .window import check_in_deadline, in_check_in_window

if TYPE_CHECKING:
    from ..attendance.model import AttendanceRecord
    from ..sessions.model import Session


@dataclass(frozen=True)
class VeracityCheck:
    location_match: bool
    time_window: bool
    no_duplicates: bool
    identity_plausible: bool
    session_active: bool
    distance_meters: int
    reasons: tuple[Rejection, ...] = ()

    @property
    def overall_valid(self) -> bool:
        return (
            self.location_match
            and self.time_window
            and self.no_duplicates
            and self.identity_plausible
            and self.session_active
        )

    @property
    def messages(self) -> list[str]:
        return [r.message for r in self.reasons]


class CheckInValidator:
    def check(
        self,
        *,
        session: Session,
        student_address: str,
        location: GeoPoint,
        existing_records: Iterable[AttendanceRecord],
        now: datetime,
    ) -> VeracityCheck:
        reasons: list[Rejection] = []

        proximity = within_radius(location, session.location, session.allowed_radius)
        if not proximity.is_valid:
            reasons.append(
                Rejection(
                    RejectionCode.OUT_OF_RANGE,
                    f"You are {proximity.distance_meters}m away from class location. "
                    f"Maximum allowed distance is {session.allowed_radius}m.",
                )
            )

        time_ok = in_check_in_window(now, session.start_time, session.check_in_window)
        if not time_ok:
            if now < session.start_time:
                reasons.append(
                    Rejection(
                        RejectionCode.WINDOW_NOT_OPEN,
                        f"Class hasn't started yet. Check-in opens at {session.start_time:%H:%M:%S}.",
                    )
                )
            else:
                closes = check_in_deadline(session.start_time, session.check_in_window)
                reasons.append(
                    Rejection(
                        RejectionCode.WINDOW_CLOSED,
                        f"Check-in window closed at {closes:%H:%M:%S}. "
                        f"You had {session.check_in_window} minutes from {session.start_time:%H:%M:%S}.",
                    )
                )

        no_duplicates = not any(
            r.session_id == session.session_id and r.student_address == student_address for r in existing_records
        )
        if not no_duplicates:
            reasons.append(Rejection(RejectionCode.DUPLICATE_CHECK_IN, "You have already checked in for this session."))

        identity_ok = is_plausible_identity(student_address)
        if not identity_ok:
            reasons.append(Rejection(RejectionCode.INVALID_IDENTITY, "Invalid wallet address."))

        if not session.is_active:
            reasons.append(Rejection(RejectionCode.SESSION_INACTIVE, "This session has been closed by the class checker."))

        return VeracityCheck(
            location_match=proximity.is_valid,
            time_window=time_ok,
            no_duplicates=no_duplicates,
            identity_plausible=identity_ok,
            session_active=session.is_active,
            distance_meters=proximity.distance_meters,
            reasons=tuple(reasons),
        )
