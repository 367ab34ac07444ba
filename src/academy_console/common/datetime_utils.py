from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO strings (``2026-10-20T00:00:00``) are cut to the date part.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def to_iso_date(value: Union[str, date, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    value = value.strip()
    return value[:10] if value else None


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it easier.
    """
    return datetime.now().date()


def current_year_month() -> str:
    return today_local().strftime("%Y-%m")


def parse_hhmm(value: str) -> Optional[int]:
    """Parse ``HH:MM`` into minutes since midnight, None when malformed."""
    parts = (value or "").strip().split(":")
    if len(parts) != 2:
        return None
    hours, minutes = parts
    if not (hours.isdigit() and minutes.isdigit()):
        return None
    h, m = int(hours), int(minutes)
    if m > 59 or h > 24 or (h == 24 and m):
        return None
    return h * 60 + m


def format_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
