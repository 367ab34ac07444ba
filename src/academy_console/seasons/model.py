from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Season:
    """A bounded enrollment period."""

    season_id: int
    name: str
    start_date: str
    end_date: str
    description: Optional[str] = None
    student_count: int = 0
