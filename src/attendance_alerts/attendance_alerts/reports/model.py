from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..alerts.model import LearnerAlert, SessionMark
from ..cohorts.model import Learner
from ..core.enums import Role


@dataclass(frozen=True)
class Requester:
    """Authenticated caller identity, provided by the auth layer."""

    user_id: int
    role: Role


@dataclass(frozen=True)
class AttendanceCounts:
    present: int = 0
    excused_absences: int = 0
    unexcused_absences: int = 0

    @property
    def total(self) -> int:
        return self.present + self.excused_absences + self.unexcused_absences

    @property
    def attendance_rate(self) -> float:
        """Share of present records, 0-100 rounded to two decimals; 0 without records."""
        if self.total == 0:
            return 0.0
        return round(self.present / self.total * 100, 2)


@dataclass(frozen=True)
class AbsenteeEntry:
    learner_id: int
    unexcused_count: int
    display_name: Optional[str] = None
    document_id: Optional[str] = None


@dataclass(frozen=True)
class CohortSummary:
    cohort_id: int
    cohort_number: str
    total_learners: int
    total_sessions: int
    present_count: int
    excused_absence_count: int
    unexcused_absence_count: int
    attendance_rate: float
    top_absentees: list[AbsenteeEntry] = field(default_factory=list)
    alerts: list[LearnerAlert] = field(default_factory=list)


@dataclass(frozen=True)
class CohortRiskEntry:
    cohort_id: int
    cohort_number: str
    program_name: Optional[str]
    alert_count: int


@dataclass(frozen=True)
class InstructorDashboard:
    cohort_count: int = 0
    learner_count: int = 0
    session_count: int = 0
    average_attendance_rate: float = 0.0
    alert_count: int = 0
    top_at_risk_cohorts: list[CohortRiskEntry] = field(default_factory=list)
    upcoming_agenda_count: int = 0


@dataclass(frozen=True)
class AlertsByCriterion:
    consecutive_only: int = 0
    monthly_only: int = 0
    both: int = 0


@dataclass(frozen=True)
class ProgramRankingEntry:
    program_id: int
    program_name: Optional[str]
    alert_count: int


@dataclass(frozen=True)
class CohortAbsenceEntry:
    cohort_id: int
    cohort_number: str
    program_name: Optional[str]
    unexcused_count: int


@dataclass(frozen=True)
class CoordinationPanel:
    active_cohort_count: int = 0
    active_learner_count: int = 0
    alerts_by_criterion: AlertsByCriterion = field(default_factory=AlertsByCriterion)
    program_ranking: list[ProgramRankingEntry] = field(default_factory=list)
    cohort_ranking: list[CohortAbsenceEntry] = field(default_factory=list)


@dataclass(frozen=True)
class CohortAlertList:
    """Live alert list of a cohort (trailing-streak mode)."""

    cohort_id: int
    cohort_number: str
    period: str
    alerts: list[LearnerAlert] = field(default_factory=list)


@dataclass(frozen=True)
class LearnerSummary:
    learner: Learner
    cohort_number: str
    present_count: int
    excused_absence_count: int
    unexcused_absence_count: int
    attendance_rate: float
    recent_sessions: list[SessionMark] = field(default_factory=list)
    alert: Optional[LearnerAlert] = None
