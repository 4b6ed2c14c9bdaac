from __future__ import annotations

from typing import Sequence

from ...attendance.model import AttendanceRecord
from .base import StreakStrategy


class TrailingStreakStrategy(StreakStrategy):
    """Current streak: unexcused absences counted back from the most recent session."""

    def streak(self, records: Sequence[AttendanceRecord]) -> int:
        count = 0
        for record in sorted(records, key=lambda r: r.session_date, reverse=True):
            if not record.is_unexcused_absence:
                break
            count += 1
        return count
