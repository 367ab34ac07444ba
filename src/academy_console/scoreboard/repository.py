from __future__ import annotations

from typing import Optional, Protocol

from .model import Scoreboard, ScoreEntry


class ScoreboardRepository(Protocol):
    """Public (no login) scoreboard endpoints."""

    def get(self, slug: str) -> Optional[Scoreboard]:
        raise NotImplementedError

    def scores(self, slug: str) -> Optional[tuple[str, list[ScoreEntry]]]:
        """Title and full score list, None when the board does not exist."""

        raise NotImplementedError
