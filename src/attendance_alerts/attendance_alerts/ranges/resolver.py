from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..common.datetime_utils import now_utc, parse_iso_instant, start_of_day_utc
from ..core.exceptions import InvalidRangeError

YEAR_MONTH_PATTERN = re.compile(r"\d{4}-\d{2}")


@dataclass(frozen=True)
class DateRange:
    """Inclusive UTC range used to select sessions for a report."""

    start: datetime
    end: datetime

    def contains_date(self, session_date: date) -> bool:
        """A session belongs to the range when its midnight (UTC) falls inside it."""
        instant = start_of_day_utc(session_date)
        return self.start <= instant <= self.end

    @property
    def label(self) -> str:
        """YYYY-MM when the range is exactly one calendar month, else start_end dates."""
        if self == month_to_range(self.start.year, self.start.month):
            return f"{self.start.year:04d}-{self.start.month:02d}"
        return f"{self.start.strftime('%Y%m%d')}_{self.end.strftime('%Y%m%d')}"


def month_to_range(year: int, month: int) -> DateRange:
    """First instant of the month to 23:59:59.999 of its last day.

    The end is "first instant of next month minus one millisecond", so month
    length and leap years need no calendar lookup. December ends on the 31st
    directly, which keeps year 9999 representable.
    """
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        return DateRange(start=start, end=datetime(year, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc))
    next_month = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return DateRange(start=start, end=next_month - timedelta(milliseconds=1))


def parse_year_month(value: str) -> DateRange:
    if not YEAR_MONTH_PATTERN.fullmatch(value or ""):
        raise InvalidRangeError("Month must use the YYYY-MM format")

    year, month = (int(part) for part in value.split("-"))
    if not 1 <= month <= 12:
        raise InvalidRangeError(f"Month out of range: {value}")
    try:
        return month_to_range(year, month)
    except ValueError as e:
        raise InvalidRangeError(f"Year out of range: {value}") from e


def resolve_range(
    explicit_from: Optional[str] = None,
    explicit_to: Optional[str] = None,
    year_month: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> DateRange:
    """Turn request parameters into one canonical inclusive range.

    Precedence: ``year_month``, then both explicit bounds, then the current
    UTC month. A lone ``from`` or ``to`` falls back to the current month.
    """
    if year_month:
        return parse_year_month(year_month)

    if explicit_from and explicit_to:
        try:
            start = parse_iso_instant(explicit_from)
            end = parse_iso_instant(explicit_to)
        except ValueError as e:
            raise InvalidRangeError(f"Invalid date: {e}") from e
        if end < start:
            raise InvalidRangeError("The end of the range is before its start")
        return DateRange(start=start, end=end)

    current = (now or now_utc()).astimezone(timezone.utc)
    return month_to_range(current.year, current.month)
