from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import MonthlyTestStatus, RecordDirection

DIRECTION_LABELS = {
    RecordDirection.HIGHER: "높을수록 좋음",
    RecordDirection.LOWER: "낮을수록 좋음",
}

GENDER_LABELS = {"male": "남", "female": "여"}

CONDITION_OPTIONS = {
    "excellent": "최상",
    "good": "양호",
    "normal": "보통",
    "poor": "부진",
    "bad": "불량",
}


@dataclass(frozen=True)
class RecordType:
    """A measured event (종목), e.g. a 20m shuttle run."""

    record_type_id: int
    name: str
    unit: Optional[str] = None
    direction: RecordDirection = RecordDirection.HIGHER
    display_order: int = 0
    is_active: bool = True

    def is_better(self, a: float, b: float) -> bool:
        """True when value ``a`` beats value ``b``."""
        if self.direction == RecordDirection.LOWER:
            return a < b
        return a > b


@dataclass(frozen=True)
class MonthlyTest:
    test_id: int
    name: str
    year_month: str
    status: MonthlyTestStatus = MonthlyTestStatus.DRAFT
    description: Optional[str] = None


@dataclass(frozen=True)
class TestSession:
    session_id: int
    test_id: int
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
