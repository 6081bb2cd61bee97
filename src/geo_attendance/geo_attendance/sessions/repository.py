from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Session


class SessionRepository(Protocol):
    def add(self, session: Session) -> None:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Session]:
        """All sessions in declaration order, active or not."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Session]:
        raise NotImplementedError

    def list_by_creator(self, created_by: str) -> Sequence[Session]:
        raise NotImplementedError

    def list_by_course(self, course_code: str) -> Sequence[Session]:
        raise NotImplementedError

    def set_active(self, session_id: str, is_active: bool) -> bool:
        raise NotImplementedError

    def increment_attendee_count(self, session_id: str) -> bool:
        raise NotImplementedError
