from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..verification.proximity import GeoPoint


@dataclass(frozen=True)
class Session:
    """Domain entity: one declared class meeting."""

    session_id: str
    course_code: str
    course_name: str
    description: str
    start_time: datetime
    end_time: datetime
    created_by: str
    location: GeoPoint
    allowed_radius: int
    check_in_window: int
    excuse_deadline_hours: int
    declaration_time: datetime
    is_active: bool = True
    attendee_count: int = 0
    transaction_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "course_code": self.course_code,
            "course_name": self.course_name,
            "description": self.description,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "created_by": self.created_by,
            "location": self.location.to_dict(),
            "allowed_radius": self.allowed_radius,
            "check_in_window": self.check_in_window,
            "excuse_deadline_hours": self.excuse_deadline_hours,
            "declaration_time": self.declaration_time.isoformat(),
            "is_active": self.is_active,
            "attendee_count": self.attendee_count,
            "transaction_id": self.transaction_id,
        }


@dataclass(frozen=True)
class NewSession:
    """Input for declaring a session; zero/None numeric fields take the defaults."""

    course_code: str
    course_name: str
    start_time: datetime
    end_time: datetime
    location: GeoPoint
    description: str = ""
    allowed_radius: Optional[int] = None
    check_in_window: Optional[int] = None
    excuse_deadline_hours: Optional[int] = None
