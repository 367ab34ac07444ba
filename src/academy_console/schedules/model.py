from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import TimeSlot


@dataclass(frozen=True)
class Schedule:
    """A class (수업) held in one of the coarse time slots."""

    schedule_id: int
    name: str
    time_slot: TimeSlot
    instructor_id: Optional[int] = None
    instructor_name: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    capacity: Optional[int] = None
    memo: Optional[str] = None
