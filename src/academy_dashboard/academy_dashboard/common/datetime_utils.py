from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from ..core.constants import ATTENDANCE_TIME_OF_DAY


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as sent by the backend (``Z`` suffix allowed)."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_clock_time(value: datetime) -> str:
    """Format as ``HH:MM AM/PM``, the way roster rows show check-in times."""
    return value.strftime("%I:%M %p")


def clock_time_from_iso(value: Optional[str]) -> Optional[str]:
    """Backend timestamp -> local ``HH:MM AM/PM``; empty or unparseable values give None."""
    if not value:
        return None
    try:
        parsed = parse_iso_datetime(str(value))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return format_clock_time(parsed)


def attendance_instant(day: date) -> datetime:
    """Normalize a calendar day to the fixed UTC instant the backend keys attendance on."""
    return datetime.combine(day, ATTENDANCE_TIME_OF_DAY, tzinfo=timezone.utc)


def long_date(day: date) -> str:
    """e.g. ``October 17, 2026``."""
    return f"{day.strftime('%B')} {day.day:02d}, {day.year}"
