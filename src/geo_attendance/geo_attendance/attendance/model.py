from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..verification.proximity import GeoPoint


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the single attendance outcome of a (session, student) pair.

    Records created by excuse approval carry ``location=None``,
    ``location_verified=False`` and ``check_in_attempts=0``, which keeps them
    distinguishable from physically verified check-ins.
    """

    record_id: str
    session_id: str
    student_address: str
    timestamp: datetime
    status: AttendanceStatus
    location: Optional[GeoPoint]
    location_verified: bool
    distance_from_class: int
    check_in_attempts: int
    transaction_id: str

    @property
    def physically_verified(self) -> bool:
        return self.location_verified and self.check_in_attempts > 0

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "session_id": self.session_id,
            "student_address": self.student_address,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "location": self.location.to_dict() if self.location else None,
            "location_verified": self.location_verified,
            "distance_from_class": self.distance_from_class,
            "check_in_attempts": self.check_in_attempts,
            "transaction_id": self.transaction_id,
        }
