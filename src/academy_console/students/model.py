from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import StudentStatus, TimeSlot


@dataclass(frozen=True)
class Student:
    student_id: int
    name: str
    status: StudentStatus
    phone: Optional[str] = None
    parent_phone: Optional[str] = None
    school: Optional[str] = None
    grade: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    memo: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
