"""Public booking availability.

Given an academy's weekly open hours, the slot duration and its blocked
dates, decide whether a calendar date can be booked and which start times
are offered on it. Pure functions of their inputs; nothing here talks to the
API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import format_hhmm, parse_hhmm, parse_iso_date, to_iso_date
from ..core.constants import WEEKDAY_KEYS
from ..core.exceptions import ValidationError

DateLike = Union[str, date]


def weekday_key(day: date) -> str:
    """``mon`` .. ``sun`` for a date."""
    return WEEKDAY_KEYS[day.weekday()]


def parse_time_range(value: str) -> Optional[tuple[int, int]]:
    """Parse ``"HH:MM-HH:MM"`` into (start, end) minutes; None if malformed."""
    if not isinstance(value, str) or "-" not in value:
        return None
    start_s, _, end_s = value.partition("-")
    start = parse_hhmm(start_s)
    end = parse_hhmm(end_s)
    if start is None or end is None:
        return None
    return start, end


def slots_for_range(start: int, end: int, duration_minutes: int) -> list[str]:
    """Start times every ``duration_minutes``; a trailing partial slot is dropped."""
    out: list[str] = []
    current = start
    while current + duration_minutes <= end:
        out.append(format_hhmm(current))
        current += duration_minutes
    return out


def blocked_dates(blocked_slots: Iterable[Mapping]) -> frozenset[str]:
    """ISO dates that are blocked for the whole day.

    Only ``date`` is read: start_time/end_time on a blocked slot do not narrow
    the block to part of the day.
    """
    out = set()
    for slot in blocked_slots or ():
        iso = to_iso_date(slot.get("date")) if isinstance(slot, Mapping) else None
        if iso:
            out.add(iso)
    return frozenset(out)


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)
    except (AttributeError, ValueError):
        raise ValidationError("날짜 형식이 올바르지 않습니다")


@dataclass(frozen=True)
class BookingAvailability:
    weekly_hours: Mapping[str, Sequence[str]] = field(default_factory=dict)
    duration_minutes: int = 30
    blocked_slots: Sequence[Mapping] = ()

    def __post_init__(self):
        if int(self.duration_minutes) <= 0:
            raise ValidationError("상담 시간은 1분 이상이어야 합니다")

    @property
    def has_weekly_hours(self) -> bool:
        return any(ranges for ranges in (self.weekly_hours or {}).values())

    def is_blocked(self, candidate: DateLike) -> bool:
        return _as_date(candidate).strftime("%Y-%m-%d") in blocked_dates(self.blocked_slots)

    def is_date_available(self, candidate: DateLike) -> bool:
        day = _as_date(candidate)
        if self.is_blocked(day):
            return False
        if not self.has_weekly_hours:
            # Nothing configured: every non-blocked date is open.
            return True
        return bool(self.weekly_hours.get(weekday_key(day)))

    def generate_slots(self, candidate: DateLike) -> list[str]:
        day = _as_date(candidate)
        if not self.is_date_available(day):
            return []

        out: list[str] = []
        for value in (self.weekly_hours or {}).get(weekday_key(day)) or ():
            parsed = parse_time_range(value)
            if parsed is None:
                continue
            start, end = parsed
            out.extend(slots_for_range(start, end, int(self.duration_minutes)))
        return out


def min_selectable_date(today: date) -> date:
    """Earliest bookable date (no past-date bookings)."""
    return today
