from __future__ import annotations

from datetime import date, timedelta

from src.attendance_alerts.attendance_alerts.attendance.model import AttendanceRecord


def records_from(pattern: str, *, learner_id: int = 1, first_day: date = date(2026, 1, 1)) -> list[AttendanceRecord]:
    """P present, E excused absence, U unexcused absence; one session per day."""
    return [
        AttendanceRecord(
            session_id=i + 1,
            learner_id=learner_id,
            session_date=first_day + timedelta(days=i),
            present=mark == "P",
            excused=mark == "E",
        )
        for i, mark in enumerate(pattern)
    ]
