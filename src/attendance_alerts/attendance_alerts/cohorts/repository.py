from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Cohort, CohortFilters, Learner


class CohortRepository(Protocol):
    """Read-only access to cohorts.

    Note (DIP): report services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, cohort_id: int) -> Optional[Cohort]:
        raise NotImplementedError

    def list_cohorts(self, filters: CohortFilters) -> Sequence[Cohort]:
        raise NotImplementedError

    def list_for_instructor(self, instructor_id: int) -> Sequence[Cohort]:
        raise NotImplementedError


class LearnerRepository(Protocol):
    def get_by_id(self, learner_id: int) -> Optional[Learner]:
        raise NotImplementedError

    def list_for_cohort(self, cohort_id: int) -> Sequence[Learner]:
        raise NotImplementedError
