from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Instructor:
    instructor_id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    specialty: Optional[str] = None
    experience: Optional[str] = None
    memo: Optional[str] = None
    created_at: Optional[str] = None
