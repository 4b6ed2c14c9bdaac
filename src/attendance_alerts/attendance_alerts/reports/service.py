from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import partial
from typing import Optional, Sequence

from ..agenda.repository import AgendaRepository
from ..alerts.engine import AlertEngine, LearnerHistory
from ..alerts.model import LearnerAlert, SessionMark
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..cohorts.model import Cohort, CohortFilters, Learner
from ..cohorts.repository import CohortRepository, LearnerRepository
from ..common.datetime_utils import now_utc
from ..core.constants import (
    RANKING_LIMIT,
    RECENT_SESSIONS_LIMIT,
    TOP_ABSENTEES_LIMIT,
    TOP_AT_RISK_COHORTS_LIMIT,
    UNNAMED_PROGRAM,
    UPCOMING_AGENDA_DAYS,
)
from ..core.enums import AlertCriterion, Role, StreakMode
from ..core.exceptions import ForbiddenError, NotFoundError
from ..export.csv_exporter import ALERT_HEADERS, ATTENDANCE_HEADERS, to_csv
from ..ranges.resolver import DateRange
from .model import (
    AbsenteeEntry,
    AlertsByCriterion,
    AttendanceCounts,
    CohortAbsenceEntry,
    CohortAlertList,
    CohortRiskEntry,
    CohortSummary,
    CoordinationPanel,
    InstructorDashboard,
    LearnerSummary,
    ProgramRankingEntry,
    Requester,
)

logger = logging.getLogger(__name__)

READER_ROLES = frozenset({Role.ADMIN, Role.COORDINATOR, Role.INSTRUCTOR})
COORDINATION_ROLES = frozenset({Role.ADMIN, Role.COORDINATOR})


@dataclass(frozen=True)
class CohortSnapshot:
    """Everything one cohort contributes to an aggregate, computed once per call."""

    cohort: Cohort
    learners: tuple[Learner, ...]
    records: tuple[AttendanceRecord, ...]
    session_count: int
    alerts: tuple[LearnerAlert, ...]

    @property
    def counts(self) -> AttendanceCounts:
        return count_attendance(self.records)


def count_attendance(records: Sequence[AttendanceRecord]) -> AttendanceCounts:
    present = excused = unexcused = 0
    for r in records:
        if r.present:
            present += 1
        elif r.excused:
            excused += 1
        else:
            unexcused += 1
    return AttendanceCounts(present=present, excused_absences=excused, unexcused_absences=unexcused)


def program_label(cohort: Cohort) -> str:
    return cohort.program_name or UNNAMED_PROGRAM


def group_by_learner(learners: Sequence[Learner], records: Sequence[AttendanceRecord]) -> list[LearnerHistory]:
    """Pair each listed learner with their own records, keeping listing order."""
    by_learner: dict[int, list[AttendanceRecord]] = {}
    for r in records:
        by_learner.setdefault(r.learner_id, []).append(r)
    return [LearnerHistory(learner=learner, records=tuple(by_learner.get(learner.learner_id, ()))) for learner in learners]


class ReportService:
    """Attendance reports: summaries, dashboards, rankings and exports.

    Everything is recomputed from the store on each call; nothing is cached.
    """

    def __init__(
        self,
        cohorts: CohortRepository,
        learners: LearnerRepository,
        attendance: AttendanceRepository,
        agenda: AgendaRepository | None = None,
        *,
        alert_engine: AlertEngine | None = None,
        executor: Executor | None = None,
    ):
        self._cohorts = cohorts
        self._learners = learners
        self._attendance = attendance
        self._agenda = agenda
        self._engine = alert_engine or AlertEngine()
        self._executor = executor

    # ---- scoping -------------------------------------------------------

    @staticmethod
    def _ensure_reader(requester: Requester) -> None:
        if requester.role not in READER_ROLES:
            logger.warning("Report access refused for user %s with role %s", requester.user_id, requester.role.value)
            raise ForbiddenError("You do not have permission to view attendance reports")

    @staticmethod
    def _ensure_owner(requester: Requester, cohort: Optional[Cohort]) -> None:
        if requester.role == Role.INSTRUCTOR and (cohort is None or cohort.instructor_id != requester.user_id):
            logger.warning("Instructor %s refused access to cohort %s", requester.user_id, cohort.cohort_id if cohort else None)
            raise ForbiddenError("You do not have permission to view this cohort")

    @staticmethod
    def ensure_coordination_access(requester: Requester) -> None:
        if requester.role not in COORDINATION_ROLES:
            logger.warning("Coordination panel refused for user %s with role %s", requester.user_id, requester.role.value)
            raise ForbiddenError("Only coordinators and administrators can open the coordination panel")

    def _get_visible_cohort(self, cohort_id: int, requester: Requester) -> Cohort:
        self._ensure_reader(requester)
        cohort = self._cohorts.get_by_id(int(cohort_id))
        if not cohort:
            raise NotFoundError(f"Cohort {cohort_id} not found")
        self._ensure_owner(requester, cohort)
        return cohort

    def _get_learner(self, learner_id: int) -> Learner:
        learner = self._learners.get_by_id(int(learner_id))
        if not learner:
            raise NotFoundError(f"Learner {learner_id} not found")
        return learner

    # ---- batch evaluation ---------------------------------------------

    def _evaluate(
        self,
        learners: Sequence[Learner],
        records: Sequence[AttendanceRecord],
        *,
        mode: StreakMode,
        include_details: bool = False,
    ) -> list[LearnerAlert]:
        """Alerts for the listed learners, dropping those that meet no criterion."""
        histories = group_by_learner(learners, records)
        alerts = self._engine.evaluate_batch(
            histories, mode=mode, include_details=include_details, executor=self._executor
        )
        return [a for a in alerts if a.is_alert]

    def _snapshot(self, cohort: Cohort, *, date_range: DateRange) -> CohortSnapshot:
        learners = tuple(self._learners.list_for_cohort(cohort.cohort_id))
        records = tuple(self._attendance.list_for_cohort(cohort.cohort_id, date_range))
        sessions = self._attendance.list_sessions(cohort.cohort_id, date_range)
        alerts = self._evaluate(learners, records, mode=StreakMode.BEST_RUN)
        return CohortSnapshot(
            cohort=cohort,
            learners=learners,
            records=records,
            session_count=len(sessions),
            alerts=tuple(alerts),
        )

    def _snapshots(self, cohorts: Sequence[Cohort], date_range: DateRange) -> list[CohortSnapshot]:
        return list(map(partial(self._snapshot, date_range=date_range), cohorts))

    # ---- operations ----------------------------------------------------

    def evaluate_learner_alert(
        self,
        learner_id: int,
        date_range: DateRange,
        *,
        mode: StreakMode = StreakMode.BEST_RUN,
        requester: Optional[Requester] = None,
    ) -> LearnerAlert:
        """Diagnostic evaluation of one learner; a NONE result is returned as is."""
        if requester is not None:
            self._ensure_reader(requester)
        learner = self._get_learner(learner_id)
        if requester is not None:
            self._ensure_owner(requester, self._cohorts.get_by_id(learner.cohort_id))

        records = self._attendance.list_for_learner(learner.learner_id, date_range)
        return self._engine.evaluate(learner.learner_id, records, mode=mode, learner=learner, date_range=date_range)

    def cohort_summary(self, cohort_id: int, date_range: DateRange, requester: Requester) -> CohortSummary:
        cohort = self._get_visible_cohort(cohort_id, requester)
        snapshot = self._snapshot(cohort, date_range=date_range)
        counts = snapshot.counts

        logger.debug(
            "Cohort %s summary: %d records, %d alerts", cohort.cohort_id, counts.total, len(snapshot.alerts)
        )
        return CohortSummary(
            cohort_id=cohort.cohort_id,
            cohort_number=cohort.cohort_number,
            total_learners=len(snapshot.learners),
            total_sessions=snapshot.session_count,
            present_count=counts.present,
            excused_absence_count=counts.excused_absences,
            unexcused_absence_count=counts.unexcused_absences,
            attendance_rate=counts.attendance_rate,
            top_absentees=self._top_absentees(snapshot.learners, snapshot.records),
            alerts=list(snapshot.alerts),
        )

    @staticmethod
    def _top_absentees(learners: Sequence[Learner], records: Sequence[AttendanceRecord]) -> list[AbsenteeEntry]:
        # Learners appear in first-seen row order; sorted() is stable so ties keep it.
        unexcused: dict[int, int] = {}
        for r in records:
            unexcused[r.learner_id] = unexcused.get(r.learner_id, 0) + (1 if r.is_unexcused_absence else 0)

        by_id = {learner.learner_id: learner for learner in learners}
        ranked = sorted(unexcused.items(), key=lambda item: item[1], reverse=True)[:TOP_ABSENTEES_LIMIT]
        return [
            AbsenteeEntry(
                learner_id=learner_id,
                unexcused_count=count,
                display_name=by_id[learner_id].display_name if learner_id in by_id else None,
                document_id=by_id[learner_id].document_id if learner_id in by_id else None,
            )
            for learner_id, count in ranked
        ]

    def instructor_dashboard(
        self,
        requester: Requester,
        date_range: DateRange,
        *,
        instructor_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> InstructorDashboard:
        """Portfolio view of one instructor; instructors may only see their own."""
        self._ensure_reader(requester)
        target = requester.user_id if instructor_id is None else int(instructor_id)
        if requester.role == Role.INSTRUCTOR and target != requester.user_id:
            raise ForbiddenError("Instructors can only view their own dashboard")

        cohorts = self._cohorts.list_for_instructor(target)
        if not cohorts:
            return InstructorDashboard()

        snapshots = self._snapshots(cohorts, date_range)
        all_records = [r for s in snapshots for r in s.records]

        at_risk = [
            CohortRiskEntry(
                cohort_id=s.cohort.cohort_id,
                cohort_number=s.cohort.cohort_number,
                program_name=program_label(s.cohort),
                alert_count=len(s.alerts),
            )
            for s in snapshots
            if s.alerts
        ]
        at_risk.sort(key=lambda e: e.alert_count, reverse=True)

        upcoming = 0
        if self._agenda is not None:
            start = now or now_utc()
            upcoming = self._agenda.count_scheduled_events(
                [c.cohort_id for c in cohorts], start, start + timedelta(days=UPCOMING_AGENDA_DAYS)
            )

        logger.debug("Instructor %s dashboard over %d cohorts", target, len(cohorts))
        return InstructorDashboard(
            cohort_count=len(cohorts),
            learner_count=sum(len(s.learners) for s in snapshots),
            session_count=sum(s.session_count for s in snapshots),
            average_attendance_rate=count_attendance(all_records).attendance_rate,
            alert_count=sum(len(s.alerts) for s in snapshots),
            top_at_risk_cohorts=at_risk[:TOP_AT_RISK_COHORTS_LIMIT],
            upcoming_agenda_count=int(upcoming),
        )

    def coordination_panel(
        self,
        filters: CohortFilters,
        date_range: DateRange,
        requester: Requester,
    ) -> CoordinationPanel:
        self.ensure_coordination_access(requester)

        cohorts = self._cohorts.list_cohorts(filters)
        if not cohorts:
            return CoordinationPanel()

        snapshots = self._snapshots(cohorts, date_range)
        alerts = [a for s in snapshots for a in s.alerts]

        by_criterion = AlertsByCriterion(
            consecutive_only=sum(1 for a in alerts if a.criterion == AlertCriterion.CONSECUTIVE),
            monthly_only=sum(1 for a in alerts if a.criterion == AlertCriterion.MONTHLY),
            both=sum(1 for a in alerts if a.criterion == AlertCriterion.BOTH),
        )

        logger.debug("Coordination panel over %d cohorts, %d alerts", len(cohorts), len(alerts))
        return CoordinationPanel(
            active_cohort_count=len(cohorts),
            active_learner_count=sum(len(s.learners) for s in snapshots),
            alerts_by_criterion=by_criterion,
            program_ranking=self._program_ranking(snapshots),
            cohort_ranking=self._cohort_ranking(snapshots),
        )

    @staticmethod
    def _program_ranking(snapshots: Sequence[CohortSnapshot]) -> list[ProgramRankingEntry]:
        totals: dict[int, ProgramRankingEntry] = {}
        for s in snapshots:
            current = totals.get(s.cohort.program_id)
            totals[s.cohort.program_id] = ProgramRankingEntry(
                program_id=s.cohort.program_id,
                program_name=(
                    current.program_name
                    if current and current.program_name != UNNAMED_PROGRAM
                    else program_label(s.cohort)
                ),
                alert_count=(current.alert_count if current else 0) + len(s.alerts),
            )
        ranked = sorted(totals.values(), key=lambda e: e.alert_count, reverse=True)
        return ranked[:RANKING_LIMIT]

    @staticmethod
    def _cohort_ranking(snapshots: Sequence[CohortSnapshot]) -> list[CohortAbsenceEntry]:
        entries = [
            CohortAbsenceEntry(
                cohort_id=s.cohort.cohort_id,
                cohort_number=s.cohort.cohort_number,
                program_name=program_label(s.cohort),
                unexcused_count=s.counts.unexcused_absences,
            )
            for s in snapshots
            if s.records
        ]
        entries.sort(key=lambda e: e.unexcused_count, reverse=True)
        return entries[:RANKING_LIMIT]

    def cohort_alerts(
        self,
        cohort_id: int,
        date_range: DateRange,
        requester: Requester,
        *,
        include_details: bool = False,
    ) -> CohortAlertList:
        """Live alert list: the current (trailing) streak of each learner."""
        cohort = self._get_visible_cohort(cohort_id, requester)
        learners = self._learners.list_for_cohort(cohort.cohort_id)
        records = self._attendance.list_for_cohort(cohort.cohort_id, date_range)
        alerts = self._evaluate(learners, records, mode=StreakMode.TRAILING, include_details=include_details)
        return CohortAlertList(
            cohort_id=cohort.cohort_id,
            cohort_number=cohort.cohort_number,
            period=date_range.label,
            alerts=alerts,
        )

    def learner_summary(self, learner_id: int, date_range: DateRange, requester: Requester) -> LearnerSummary:
        self._ensure_reader(requester)
        learner = self._get_learner(learner_id)
        cohort = self._cohorts.get_by_id(learner.cohort_id)
        self._ensure_owner(requester, cohort)

        records = self._attendance.list_for_learner(learner.learner_id, date_range)
        counts = count_attendance(records)
        alert = self._engine.evaluate(learner.learner_id, records, mode=StreakMode.BEST_RUN, learner=learner)
        latest_first = sorted(records, key=lambda r: r.session_date, reverse=True)[:RECENT_SESSIONS_LIMIT]

        return LearnerSummary(
            learner=learner,
            cohort_number=cohort.cohort_number if cohort else "",
            present_count=counts.present,
            excused_absence_count=counts.excused_absences,
            unexcused_absence_count=counts.unexcused_absences,
            attendance_rate=counts.attendance_rate,
            recent_sessions=[
                SessionMark(session_date=r.session_date, present=r.present, excused=r.excused) for r in latest_first
            ],
            alert=alert if alert.is_alert else None,
        )

    # ---- exports -------------------------------------------------------

    def export_attendance_csv(self, cohort_id: int, date_range: DateRange, requester: Requester) -> str:
        cohort = self._get_visible_cohort(cohort_id, requester)
        rows = [
            {
                "date": r.session_date,
                "cohortNumber": r.cohort_number,
                "learnerDocId": r.learner_document_id,
                "learnerName": r.learner_name,
                "present": r.present,
                "excused": r.excused,
                "reason": r.reason,
            }
            for r in self._attendance.list_export_rows(cohort.cohort_id, date_range)
        ]
        logger.debug("Exporting %d attendance rows for cohort %s", len(rows), cohort.cohort_id)
        return to_csv(rows, ATTENDANCE_HEADERS)

    def export_alerts_csv(self, cohort_id: int, date_range: DateRange, requester: Requester) -> str:
        cohort = self._get_visible_cohort(cohort_id, requester)
        learners = self._learners.list_for_cohort(cohort.cohort_id)
        records = self._attendance.list_for_cohort(cohort.cohort_id, date_range)
        rows = [
            {
                "learnerDocId": a.document_id,
                "learnerName": a.display_name,
                "consecutiveUnexcused": a.consecutive_unexcused,
                "monthlyUnexcused": a.monthly_unexcused,
                "criterion": a.criterion,
            }
            for a in self._evaluate(learners, records, mode=StreakMode.BEST_RUN)
        ]
        return to_csv(rows, ALERT_HEADERS)
