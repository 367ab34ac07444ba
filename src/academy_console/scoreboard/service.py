from __future__ import annotations

from typing import Optional

from .model import Scoreboard, ScoreEntry
from .repository import ScoreboardRepository


class ScoreboardService:
    def __init__(self, boards: ScoreboardRepository):
        self._boards = boards

    def board(self, slug: str) -> Optional[Scoreboard]:
        slug = (slug or "").strip()
        if not slug:
            return None
        return self._boards.get(slug)

    def scores(self, slug: str) -> Optional[tuple[str, list[ScoreEntry]]]:
        slug = (slug or "").strip()
        if not slug:
            return None
        return self._boards.scores(slug)
