from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import CohortStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Cohort, CohortFilters, Learner
from .repository import CohortRepository, LearnerRepository

_COHORT_COLUMNS = """
    c.cohort_id, c.cohort_number, c.institution_id, c.program_id, c.instructor_id, c.status,
    p.program_name
"""


def _to_cohort(r: dict) -> Cohort:
    return Cohort(
        cohort_id=int(r["cohort_id"]),
        cohort_number=str(r["cohort_number"]),
        institution_id=int(r["institution_id"]),
        program_id=int(r["program_id"]),
        instructor_id=int(r["instructor_id"]),
        status=CohortStatus(r["status"]),
        program_name=r.get("program_name"),
    )


class MySQLCohortRepository(CohortRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, cohort_id: int) -> Optional[Cohort]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COHORT_COLUMNS}
                FROM cohorts c
                LEFT JOIN programs p ON p.program_id = c.program_id
                WHERE c.cohort_id=%s
                """,
                (int(cohort_id),),
            )
            r = fetchone(cur)
            return _to_cohort(r) if r else None

    def list_cohorts(self, filters: CohortFilters) -> Sequence[Cohort]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.institution_id is not None:
            clauses.append("c.institution_id=%s")
            params.append(int(filters.institution_id))
        if filters.program_id is not None:
            clauses.append("c.program_id=%s")
            params.append(int(filters.program_id))
        if filters.cohort_status is not None:
            clauses.append("c.status=%s")
            params.append(filters.cohort_status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COHORT_COLUMNS}
                FROM cohorts c
                LEFT JOIN programs p ON p.program_id = c.program_id
                WHERE {where}
                ORDER BY c.cohort_id ASC
                """,
                tuple(params),
            )
            return [_to_cohort(r) for r in fetchall(cur)]

    def list_for_instructor(self, instructor_id: int) -> Sequence[Cohort]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COHORT_COLUMNS}
                FROM cohorts c
                LEFT JOIN programs p ON p.program_id = c.program_id
                WHERE c.instructor_id=%s
                ORDER BY c.cohort_id ASC
                """,
                (int(instructor_id),),
            )
            return [_to_cohort(r) for r in fetchall(cur)]


class MySQLLearnerRepository(LearnerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_learner(r: dict) -> Learner:
        return Learner(
            learner_id=int(r["learner_id"]),
            cohort_id=int(r["cohort_id"]),
            display_name=r["display_name"],
            document_id=str(r["document_id"]),
        )

    def get_by_id(self, learner_id: int) -> Optional[Learner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT learner_id, cohort_id, CONCAT(first_names, ' ', last_names) AS display_name, document_id
                FROM learners
                WHERE learner_id=%s
                """,
                (int(learner_id),),
            )
            r = fetchone(cur)
            return self._to_learner(r) if r else None

    def list_for_cohort(self, cohort_id: int) -> Sequence[Learner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT learner_id, cohort_id, CONCAT(first_names, ' ', last_names) AS display_name, document_id
                FROM learners
                WHERE cohort_id=%s
                ORDER BY last_names ASC, first_names ASC
                """,
                (int(cohort_id),),
            )
            return [self._to_learner(r) for r in fetchall(cur)]
