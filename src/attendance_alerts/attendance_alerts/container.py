from __future__ import annotations

from dataclasses import dataclass

from .agenda.mysql_agenda_repository import MySQLAgendaRepository
from .alerts.engine import AlertEngine
from .alerts.factory import StreakStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .cohorts.mysql_cohort_repository import MySQLCohortRepository, MySQLLearnerRepository
from .core.constants import CONSECUTIVE_ABSENCE_THRESHOLD, MONTHLY_ABSENCE_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    cohorts_repo: MySQLCohortRepository
    learners_repo: MySQLLearnerRepository
    attendance_repo: MySQLAttendanceRepository
    agenda_repo: MySQLAgendaRepository

    alert_engine: AlertEngine
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    consecutive_threshold: int = CONSECUTIVE_ABSENCE_THRESHOLD,
    monthly_threshold: int = MONTHLY_ABSENCE_THRESHOLD,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    cohorts_repo = MySQLCohortRepository(conn)
    learners_repo = MySQLLearnerRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    agenda_repo = MySQLAgendaRepository(conn)

    alert_engine = AlertEngine(
        strategy_factory=StreakStrategyFactory(),
        consecutive_threshold=consecutive_threshold,
        monthly_threshold=monthly_threshold,
    )
    report_service = ReportService(
        cohorts_repo,
        learners_repo,
        attendance_repo,
        agenda_repo,
        alert_engine=alert_engine,
    )

    return Container(
        conn=conn,
        cohorts_repo=cohorts_repo,
        learners_repo=learners_repo,
        attendance_repo=attendance_repo,
        agenda_repo=agenda_repo,
        alert_engine=alert_engine,
        report_service=report_service,
    )
