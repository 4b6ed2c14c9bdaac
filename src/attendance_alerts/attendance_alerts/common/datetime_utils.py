from __future__ import annotations

from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def parse_iso_instant(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime string into an aware UTC datetime.

    Accepts a trailing ``Z`` and date-only values (midnight UTC). Naive
    values are taken as UTC. Raises ValueError on malformed input.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def start_of_day_utc(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
