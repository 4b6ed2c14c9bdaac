from __future__ import annotations

from typing import Protocol, Sequence

from ..ranges.resolver import DateRange
from .model import AttendanceExportRow, AttendanceRecord, ClassSession


class AttendanceRepository(Protocol):
    """Read-only access to sessions and attendance records.

    Every listing is restricted to sessions whose date falls inside the range
    and keeps the store's natural row order (session date ascending).
    """

    def list_for_cohort(self, cohort_id: int, date_range: DateRange) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_learner(self, learner_id: int, date_range: DateRange) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_sessions(self, cohort_id: int, date_range: DateRange) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_export_rows(self, cohort_id: int, date_range: DateRange) -> Sequence[AttendanceExportRow]:
        raise NotImplementedError
