from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int
from .model import Season
from .repository import SeasonRepository


class HttpSeasonRepository(HttpRepository, SeasonRepository):
    base_path = "/seasons"

    def get(self, season_id: int) -> Optional[Season]:
        r = self.get_raw(season_id)
        if not r:
            return None
        return Season(
            season_id=as_int(r.get("id")),
            name=r.get("name") or "",
            start_date=str(r.get("start_date") or "")[:10],
            end_date=str(r.get("end_date") or "")[:10],
            description=r.get("description"),
            student_count=as_int(r.get("student_count")),
        )

    def enroll(self, season_id: int, *, student_ids: Sequence[int]) -> None:
        self._client.post(self._path(int(season_id), "enroll"), {"student_ids": [int(s) for s in student_ids]})
