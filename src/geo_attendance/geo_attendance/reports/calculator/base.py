from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...sessions.model import Session
from ..model import ExamEligibility


class EligibilityCalculator(ABC):
    """Calculator interface (Strategy Pattern for exam eligibility)."""

    @abstractmethod
    def eligibility(
        self,
        student_address: str,
        course_code: str,
        sessions: Iterable[Session],
        records: Iterable[AttendanceRecord],
    ) -> ExamEligibility:
        raise NotImplementedError
