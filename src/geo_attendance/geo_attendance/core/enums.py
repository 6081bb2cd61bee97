from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status of one (session, student) attendance record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"


class ApprovalStatus(str, Enum):
    """Review state of an excuse submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "eligible"
    AT_RISK = "at-risk"
    NOT_ELIGIBLE = "not-eligible"


class RejectionCode(str, Enum):
    """Machine-readable reason attached to a rejected operation."""

    OUT_OF_RANGE = "OUT_OF_RANGE"
    WINDOW_NOT_OPEN = "WINDOW_NOT_OPEN"
    WINDOW_CLOSED = "WINDOW_CLOSED"
    DUPLICATE_CHECK_IN = "DUPLICATE_CHECK_IN"
    INVALID_IDENTITY = "INVALID_IDENTITY"
    SESSION_INACTIVE = "SESSION_INACTIVE"

    ALREADY_ATTENDED = "ALREADY_ATTENDED"
    DUPLICATE_EXCUSE = "DUPLICATE_EXCUSE"
    EXCUSE_NOT_OPEN = "EXCUSE_NOT_OPEN"
    DEADLINE_PASSED = "DEADLINE_PASSED"
    EMPTY_REASON = "EMPTY_REASON"

    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    ALREADY_REVIEWED = "ALREADY_REVIEWED"


# Statuses that count as "the student has this session covered".
CREDITED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EXCUSED})
PHYSICAL_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})
