from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord


class StreakStrategy(ABC):
    """Strategy Pattern: encapsulate how a run of unexcused absences is measured."""

    @abstractmethod
    def streak(self, records: Sequence[AttendanceRecord]) -> int:
        raise NotImplementedError
