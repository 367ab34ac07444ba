from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Season


class SeasonRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, season_id: int) -> Optional[Season]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, season_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, season_id: int) -> None:
        raise NotImplementedError

    def enroll(self, season_id: int, *, student_ids: Sequence[int]) -> None:
        raise NotImplementedError
