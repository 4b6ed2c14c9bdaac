from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date, to_naive_utc
from ..ranges.resolver import DateRange
from .model import AttendanceExportRow, AttendanceRecord, ClassSession
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        session_id=int(r["session_id"]),
        learner_id=int(r["learner_id"]),
        session_date=normalize_mysql_date(r["session_date"]),
        present=bool(r["present"]),
        excused=bool(r["excused"]),
        reason=r.get("reason"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _range_params(date_range: DateRange) -> tuple:
        return to_naive_utc(date_range.start), to_naive_utc(date_range.end)

    def list_for_cohort(self, cohort_id: int, date_range: DateRange) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.session_id, a.learner_id, cs.session_date, a.present, a.excused, a.reason
                FROM attendance a
                JOIN class_sessions cs ON cs.session_id = a.session_id
                WHERE cs.cohort_id=%s AND cs.session_date >= %s AND cs.session_date <= %s
                ORDER BY cs.session_date ASC, a.learner_id ASC
                """,
                (int(cohort_id), *self._range_params(date_range)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_learner(self, learner_id: int, date_range: DateRange) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.session_id, a.learner_id, cs.session_date, a.present, a.excused, a.reason
                FROM attendance a
                JOIN class_sessions cs ON cs.session_id = a.session_id
                WHERE a.learner_id=%s AND cs.session_date >= %s AND cs.session_date <= %s
                ORDER BY cs.session_date ASC
                """,
                (int(learner_id), *self._range_params(date_range)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_sessions(self, cohort_id: int, date_range: DateRange) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, cohort_id, session_date
                FROM class_sessions
                WHERE cohort_id=%s AND session_date >= %s AND session_date <= %s
                ORDER BY session_date ASC
                """,
                (int(cohort_id), *self._range_params(date_range)),
            )
            return [
                ClassSession(
                    session_id=int(r["session_id"]),
                    cohort_id=int(r["cohort_id"]),
                    session_date=normalize_mysql_date(r["session_date"]),
                )
                for r in fetchall(cur)
            ]

    def list_export_rows(self, cohort_id: int, date_range: DateRange) -> Sequence[AttendanceExportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    cs.session_date, c.cohort_number,
                    l.document_id, CONCAT(l.first_names, ' ', l.last_names) AS learner_name,
                    a.present, a.excused, a.reason
                FROM attendance a
                JOIN class_sessions cs ON cs.session_id = a.session_id
                JOIN cohorts c ON c.cohort_id = cs.cohort_id
                JOIN learners l ON l.learner_id = a.learner_id
                WHERE cs.cohort_id=%s AND cs.session_date >= %s AND cs.session_date <= %s
                ORDER BY cs.session_date ASC, l.last_names ASC
                """,
                (int(cohort_id), *self._range_params(date_range)),
            )
            return [
                AttendanceExportRow(
                    session_date=normalize_mysql_date(r["session_date"]),
                    cohort_number=str(r["cohort_number"]),
                    learner_document_id=str(r["document_id"]),
                    learner_name=r["learner_name"],
                    present=bool(r["present"]),
                    excused=bool(r["excused"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]
