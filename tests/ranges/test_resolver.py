from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.attendance_alerts.attendance_alerts.core.exceptions import InvalidRangeError, ValidationError
from src.attendance_alerts.attendance_alerts.ranges.resolver import month_to_range, resolve_range


def test_month_range_covers_leap_february():
    r = resolve_range(year_month="2024-02")
    assert r.start == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert r.end == datetime(2024, 2, 29, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_december_rolls_over_to_next_year():
    r = month_to_range(2025, 12)
    assert r.start == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert r.end == datetime(2025, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    ["2024-13", "2024-00", "2024-2", "24-02", "2024/02", "abcd-ef", "2024-02\n", " 2024-02", "0000-01"],
)
def test_invalid_month_rejected(value):
    with pytest.raises(InvalidRangeError):
        resolve_range(year_month=value)


def test_last_representable_month():
    r = resolve_range(year_month="9999-12")
    assert r.start == datetime(9999, 12, 1, tzinfo=timezone.utc)
    assert r.end == datetime(9999, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert r.label == "9999-12"


def test_invalid_range_is_a_validation_error():
    with pytest.raises(ValidationError):
        resolve_range(year_month="2024-13")


def test_month_takes_precedence_over_explicit_bounds():
    r = resolve_range("2020-01-01T00:00:00Z", "2020-12-31T00:00:00Z", "2026-01")
    assert r == month_to_range(2026, 1)


def test_explicit_bounds_are_used_as_given():
    r = resolve_range("2026-01-05T08:00:00Z", "2026-01-09T18:00:00Z")
    assert r.start == datetime(2026, 1, 5, 8, tzinfo=timezone.utc)
    assert r.end == datetime(2026, 1, 9, 18, tzinfo=timezone.utc)


def test_explicit_bounds_accept_offsets_and_plain_dates():
    r = resolve_range("2026-01-05", "2026-01-09T05:00:00-05:00")
    assert r.start == datetime(2026, 1, 5, tzinfo=timezone.utc)
    assert r.end == datetime(2026, 1, 9, 10, tzinfo=timezone.utc)


def test_inverted_bounds_rejected():
    with pytest.raises(InvalidRangeError):
        resolve_range("2026-01-10T00:00:00Z", "2026-01-09T00:00:00Z")


def test_unparseable_bound_rejected():
    with pytest.raises(InvalidRangeError):
        resolve_range("yesterday", "2026-01-09T00:00:00Z")


def test_default_is_current_utc_month(fixed_now):
    assert resolve_range(now=fixed_now) == month_to_range(2026, 1)


def test_lone_bound_falls_back_to_current_month(fixed_now):
    assert resolve_range("2025-06-01T00:00:00Z", None, now=fixed_now) == month_to_range(2026, 1)
    assert resolve_range(None, "2025-06-30T00:00:00Z", now=fixed_now) == month_to_range(2026, 1)


def test_contains_date_uses_midnight_utc():
    r = resolve_range("2026-01-05T00:00:00Z", "2026-01-09T12:00:00Z")
    assert r.contains_date(date(2026, 1, 5))
    assert r.contains_date(date(2026, 1, 9))
    assert not r.contains_date(date(2026, 1, 4))
    assert not r.contains_date(date(2026, 1, 10))

    late_start = resolve_range("2026-01-05T06:00:00Z", "2026-01-09T00:00:00Z")
    assert not late_start.contains_date(date(2026, 1, 5))


def test_label():
    assert month_to_range(2026, 1).label == "2026-01"
    assert resolve_range("2026-01-05T00:00:00Z", "2026-02-09T00:00:00Z").label == "20260105_20260209"
