"""Clock and text helpers shared by the scheduler and the drafters."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Iterable, Optional

from dateutil import parser as date_parser

MINUTES_PER_DAY = 24 * 60


def parse_clock_time(value: object) -> time:
    """Parse a wall-clock time such as ``10:00`` or ``9:30 AM``.

    Raises ``ValueError`` when the text is not a recognisable time of day, or
    when it carries seconds: tour times are whole minutes.
    """
    if isinstance(value, datetime):
        return _whole_minutes(value.time(), value.isoformat())
    if isinstance(value, time):
        return _whole_minutes(value, value.isoformat())
    cleaned = normalise_whitespace(str(value or ""))
    if not cleaned:
        raise ValueError("start time is required")
    if not re.search(r"\d", cleaned):
        raise ValueError(f"'{cleaned}' is not a time of day")
    try:
        parsed = date_parser.parse(cleaned, default=datetime(2000, 1, 1))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"'{cleaned}' is not a time of day") from exc
    if parsed.date() != date(2000, 1, 1):
        raise ValueError(f"'{cleaned}' contains a date, expected a time of day")
    return _whole_minutes(parsed.time(), cleaned)


def _whole_minutes(value: time, label: str) -> time:
    if value.second or value.microsecond:
        raise ValueError(f"'{label}' has seconds; times must be whole minutes")
    return value.replace(tzinfo=None)


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    """Convert a minute offset within one day back into a clock time."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single calendar day")
    return time(hour=minutes // 60, minute=minutes % 60)


def format_clock(value: time, clock_format: str = "24h") -> str:
    """Render a time as ``10:27`` (24h) or ``10:27 AM`` (12h)."""
    if clock_format == "12h":
        hour = value.hour % 12 or 12
        suffix = "AM" if value.hour < 12 else "PM"
        return f"{hour}:{value.minute:02d} {suffix}"
    return f"{value.hour:02d}:{value.minute:02d}"


def verbose_date(value: date) -> str:
    """Long form used in email bodies, e.g. ``Saturday, December 20, 2025``."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def normalise_whitespace(text: str) -> str:
    """Collapse repeated whitespace into single spaces."""
    return re.sub(r"\s+", " ", text or "").strip()


def blank_to_none(value: object) -> Optional[object]:
    """Treat empty or whitespace-only strings as missing."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def first_non_empty(values: Iterable[str | None]) -> Optional[str]:
    """Return the first non-empty string from an iterable."""
    for value in values:
        if value:
            stripped = value.strip()
            if stripped:
                return stripped
    return None
