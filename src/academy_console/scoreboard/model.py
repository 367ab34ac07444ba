from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ScoreEntry:
    student_name: str
    value: Optional[float]
    unit: str = ""
    category: Optional[str] = None
    date: Optional[str] = None

    @property
    def display_value(self) -> str:
        if self.value is None:
            return "-"
        value = int(self.value) if float(self.value).is_integer() else self.value
        return f"{value}{self.unit}"


@dataclass(frozen=True)
class ScoreCategory:
    name: str
    description: Optional[str] = None
    top_scores: tuple[ScoreEntry, ...] = ()


@dataclass(frozen=True)
class Scoreboard:
    slug: str
    title: str = "스코어보드"
    academy_name: Optional[str] = None
    description: Optional[str] = None
    categories: tuple[ScoreCategory, ...] = field(default_factory=tuple)
