from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class ExcuseSubmission:
    excuse_id: str
    session_id: str
    student_address: str
    reason: str
    submission_time: datetime
    approval_status: ApprovalStatus
    is_within_deadline: bool
    transaction_id: str
    reviewed_by: Optional[str] = None
    review_time: Optional[datetime] = None
    review_notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.approval_status == ApprovalStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.excuse_id,
            "session_id": self.session_id,
            "student_address": self.student_address,
            "reason": self.reason,
            "submission_time": self.submission_time.isoformat(),
            "approval_status": self.approval_status.value,
            "is_within_deadline": self.is_within_deadline,
            "transaction_id": self.transaction_id,
            "reviewed_by": self.reviewed_by,
            "review_time": self.review_time.isoformat() if self.review_time else None,
            "review_notes": self.review_notes,
        }
