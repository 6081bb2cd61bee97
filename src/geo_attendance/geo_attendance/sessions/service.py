from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import as_local_naive, now_local
from ..common.ids import new_id, new_reference
from ..common.validators import is_plausible_identity, require_non_empty, require_positive
from ..core.constants import (
    DEFAULT_ALLOWED_RADIUS_METERS,
    DEFAULT_CHECK_IN_WINDOW_MINUTES,
    DEFAULT_EXCUSE_DEADLINE_HOURS,
)
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import NewSession, Session
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(
        self,
        sessions: SessionRepository,
        *,
        default_radius: int = DEFAULT_ALLOWED_RADIUS_METERS,
        default_window: int = DEFAULT_CHECK_IN_WINDOW_MINUTES,
        default_deadline_hours: int = DEFAULT_EXCUSE_DEADLINE_HOURS,
    ):
        self._sessions = sessions
        self._default_radius = int(default_radius)
        self._default_window = int(default_window)
        self._default_deadline_hours = int(default_deadline_hours)

    def declare(self, *, creator: str, data: NewSession, now: datetime | None = None) -> Session:
        now = now or now_local()

        # Only a plausible wallet may act as a checker.
        if not is_plausible_identity(creator):
            raise AuthorizationError("Only verified checkers can declare class sessions")

        course_code = require_non_empty(data.course_code, "Course code")
        course_name = require_non_empty(data.course_name, "Course name")
        start_time = as_local_naive(data.start_time)
        end_time = as_local_naive(data.end_time)
        if end_time <= start_time:
            raise ValidationError("Session end time must be after its start time")

        radius = int(require_positive(data.allowed_radius or self._default_radius, "Allowed radius"))
        window = int(require_positive(data.check_in_window or self._default_window, "Check-in window"))
        deadline = int(require_positive(data.excuse_deadline_hours or self._default_deadline_hours, "Excuse deadline"))

        session = Session(
            session_id=new_id(),
            course_code=course_code,
            course_name=course_name,
            description=(data.description or "").strip(),
            start_time=start_time,
            end_time=end_time,
            created_by=creator,
            location=data.location,
            allowed_radius=radius,
            check_in_window=window,
            excuse_deadline_hours=deadline,
            declaration_time=now,
            is_active=True,
            attendee_count=0,
            transaction_id=new_reference("session"),
        )
        self._sessions.add(session)
        logger.info("Session %s declared for %s by %s", session.session_id, course_code, creator)
        return session

    def deactivate(self, *, requester: str, session_id: str) -> Session:
        session = self.get(session_id)
        if session.created_by != requester:
            raise AuthorizationError("Only the class checker can close this session")
        if session.is_active:
            self._sessions.set_active(session_id, False)
            logger.info("Session %s deactivated", session_id)
        return self.get(session_id)

    def get(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def list_active(self) -> Sequence[Session]:
        return self._sessions.list_active()

    def list_for_creator(self, creator: str) -> Sequence[Session]:
        return self._sessions.list_by_creator(creator)

    def list_for_course(self, course_code: str) -> Sequence[Session]:
        return self._sessions.list_by_course(course_code)
