from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CohortStatus


@dataclass(frozen=True)
class Cohort:
    """Read-model of a training cohort owned by the records store."""

    cohort_id: int
    cohort_number: str
    institution_id: int
    program_id: int
    instructor_id: int
    status: CohortStatus
    program_name: Optional[str] = None


@dataclass(frozen=True)
class Learner:
    learner_id: int
    cohort_id: int
    display_name: str
    document_id: str


@dataclass(frozen=True)
class CohortFilters:
    """Optional filters applied when listing cohorts organization-wide."""

    institution_id: Optional[int] = None
    program_id: Optional[int] = None
    cohort_status: Optional[CohortStatus] = None

    def matches(self, cohort: Cohort) -> bool:
        if self.institution_id is not None and cohort.institution_id != self.institution_id:
            return False
        if self.program_id is not None and cohort.program_id != self.program_id:
            return False
        if self.cohort_status is not None and cohort.status != self.cohort_status:
            return False
        return True
