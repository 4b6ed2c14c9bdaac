from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class ClassSession:
    session_id: int
    cohort_id: int
    session_date: date


@dataclass(frozen=True)
class AttendanceRecord:
    """One learner's attendance at one session, joined with the session date.

    ``excused`` only means something for absences; a present record is never
    counted as excused or unexcused.
    """

    session_id: int
    learner_id: int
    session_date: date
    present: bool
    excused: bool = False
    reason: Optional[str] = None

    @property
    def is_unexcused_absence(self) -> bool:
        return not self.present and not self.excused

    @property
    def is_excused_absence(self) -> bool:
        return not self.present and self.excused


@dataclass(frozen=True)
class AttendanceExportRow:
    """Read-model for the attendance detail export (optimized for the query)."""

    session_date: date
    cohort_number: str
    learner_document_id: str
    learner_name: str
    present: bool
    excused: bool
    reason: Optional[str] = None
