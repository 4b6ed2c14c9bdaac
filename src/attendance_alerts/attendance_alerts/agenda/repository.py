from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence


class AgendaRepository(Protocol):
    def count_scheduled_events(self, cohort_ids: Sequence[int], start: datetime, end: datetime) -> int:
        """Count events still scheduled for the cohorts whose start falls in [start, end]."""

        raise NotImplementedError
