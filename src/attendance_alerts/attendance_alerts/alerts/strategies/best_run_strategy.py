from __future__ import annotations

from typing import Sequence

from ...attendance.model import AttendanceRecord
from .base import StreakStrategy


class BestRunStreakStrategy(StreakStrategy):
    """Longest run of unexcused absences anywhere in the range."""

    def streak(self, records: Sequence[AttendanceRecord]) -> int:
        current = 0
        longest = 0
        for record in sorted(records, key=lambda r: r.session_date):
            if record.is_unexcused_absence:
                current += 1
                longest = max(longest, current)
            else:
                current = 0
        return longest
