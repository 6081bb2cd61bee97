from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .enums import RejectionCode


@dataclass(frozen=True)
class Rejection:
    """One violated rule, with a message suitable for direct display."""

    code: RejectionCode
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced session or excuse does not exist."""


class AuthorizationError(DomainError):
    """Raised when an identity lacks permission for an action."""


class RuleViolation(DomainError):
    """Raised when one or more attendance rules reject an operation.

    Every failed check is collected into ``reasons`` so callers can show all
    unmet conditions at once.
    """

    def __init__(self, reasons: Iterable[Rejection]):
        self.reasons = list(reasons)
        super().__init__(" ".join(r.message for r in self.reasons))

    @property
    def codes(self) -> list[RejectionCode]:
        return [r.code for r in self.reasons]


class CheckInRejected(RuleViolation):
    pass


class ExcuseRejected(RuleViolation):
    pass


class ReviewRejected(RuleViolation):
    pass


class CollaboratorUnavailable(DomainError):
    """An external collaborator (geolocation, persistence) failed.

    Never a rule violation: the request could not be evaluated at all.
    """


class LocationUnavailable(CollaboratorUnavailable):
    pass


class PersistenceUnavailable(CollaboratorUnavailable):
    pass


class DuplicateKeyError(DomainError):
    """Raised by stores when a (session, student) uniqueness key is taken."""
