from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, in_clause, to_naive_utc
from .repository import AgendaRepository

SCHEDULED_STATUS = "SCHEDULED"


class MySQLAgendaRepository(AgendaRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def count_scheduled_events(self, cohort_ids: Sequence[int], start: datetime, end: datetime) -> int:
        if not cohort_ids:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM calendar_events
                WHERE cohort_id IN ({in_clause(cohort_ids)})
                  AND status=%s
                  AND starts_at >= %s AND starts_at <= %s
                """,
                (*[int(c) for c in cohort_ids], SCHEDULED_STATUS, to_naive_utc(start), to_naive_utc(end)),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0
