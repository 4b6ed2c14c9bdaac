from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from functools import partial
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..cohorts.model import Learner
from ..core.constants import (
    CONSECUTIVE_ABSENCE_THRESHOLD,
    MONTHLY_ABSENCE_THRESHOLD,
    RECENT_SESSIONS_LIMIT,
)
from ..core.enums import AlertCriterion, StreakMode
from ..ranges.resolver import DateRange
from .factory import StreakStrategyFactory
from .model import LearnerAlert, SessionMark

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LearnerHistory:
    """A learner paired with their attendance records inside the range."""

    learner: Learner
    records: tuple[AttendanceRecord, ...]


class AlertEngine:
    """Classify learners as at risk from their attendance history.

    Two streak measures exist (see ``StreakMode``); the monthly count is the
    same for both: every unexcused absence in the records given.
    """

    def __init__(
        self,
        *,
        strategy_factory: StreakStrategyFactory | None = None,
        consecutive_threshold: int = CONSECUTIVE_ABSENCE_THRESHOLD,
        monthly_threshold: int = MONTHLY_ABSENCE_THRESHOLD,
    ):
        self._factory = strategy_factory or StreakStrategyFactory()
        self._consecutive_threshold = int(consecutive_threshold)
        self._monthly_threshold = int(monthly_threshold)

    def classify(self, consecutive: int, monthly: int) -> AlertCriterion:
        consecutive_ok = consecutive >= self._consecutive_threshold
        monthly_ok = monthly >= self._monthly_threshold
        if consecutive_ok and monthly_ok:
            return AlertCriterion.BOTH
        if consecutive_ok:
            return AlertCriterion.CONSECUTIVE
        if monthly_ok:
            return AlertCriterion.MONTHLY
        return AlertCriterion.NONE

    def evaluate(
        self,
        learner_id: int,
        records: Sequence[AttendanceRecord],
        *,
        mode: StreakMode = StreakMode.BEST_RUN,
        learner: Optional[Learner] = None,
        include_details: bool = False,
        date_range: Optional[DateRange] = None,
    ) -> LearnerAlert:
        """Classify one learner from their attendance records.

        Records are expected to belong to the learner and to the reporting
        range already; when ``date_range`` is given, records whose session
        falls outside it are dropped first.
        """
        if date_range is not None:
            records = [r for r in records if date_range.contains_date(r.session_date)]

        streak = self._factory.for_mode(mode).streak(records)
        monthly = sum(1 for r in records if r.is_unexcused_absence)
        criterion = self.classify(streak, monthly)

        details: tuple[SessionMark, ...] = ()
        if include_details:
            latest_first = sorted(records, key=lambda r: r.session_date, reverse=True)
            details = tuple(
                SessionMark(session_date=r.session_date, present=r.present, excused=r.excused)
                for r in latest_first[:RECENT_SESSIONS_LIMIT]
            )

        return LearnerAlert(
            learner_id=learner_id,
            consecutive_unexcused=streak,
            monthly_unexcused=monthly,
            criterion=criterion,
            display_name=learner.display_name if learner else None,
            document_id=learner.document_id if learner else None,
            recent_sessions=details,
        )

    def evaluate_batch(
        self,
        histories: Sequence[LearnerHistory],
        *,
        mode: StreakMode,
        include_details: bool = False,
        executor: Optional[Executor] = None,
    ) -> list[LearnerAlert]:
        """Evaluate every history independently, keeping input order.

        Each evaluation reads only its own slice, so an executor may run them
        in parallel without coordination.
        """
        evaluate_one = partial(self._evaluate_history, mode=mode, include_details=include_details)
        mapper = executor.map if executor is not None else map
        alerts = list(mapper(evaluate_one, histories))
        logger.debug("Evaluated %d learner histories in %s mode", len(alerts), mode.value)
        return alerts

    def _evaluate_history(self, history: LearnerHistory, *, mode: StreakMode, include_details: bool) -> LearnerAlert:
        return self.evaluate(
            history.learner.learner_id,
            history.records,
            mode=mode,
            learner=history.learner,
            include_details=include_details,
        )
