from __future__ import annotations

from typing import Optional

from ..api.client import ApiClient
from ..api.http_base import as_float, as_str, unwrap_item
from ..core.exceptions import NotFoundError
from .model import ScoreCategory, ScoreEntry, Scoreboard
from .repository import ScoreboardRepository


def _entry(r: dict) -> ScoreEntry:
    return ScoreEntry(
        student_name=r.get("student_name") or "",
        value=as_float(r.get("value")),
        unit=r.get("unit") or "",
        category=r.get("category") or None,
        date=as_str(r.get("date") or r.get("measured_at")),
    )


class HttpScoreboardRepository(ScoreboardRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get(self, slug: str) -> Optional[Scoreboard]:
        try:
            r = unwrap_item(self._client.get(f"/public/scoreboard/{slug}"))
        except NotFoundError:
            return None
        if not r:
            return None
        categories = tuple(
            ScoreCategory(
                name=c.get("name") or "",
                description=c.get("description"),
                top_scores=tuple(_entry(s) for s in c.get("top_scores") or [] if isinstance(s, dict)),
            )
            for c in r.get("categories") or []
            if isinstance(c, dict)
        )
        return Scoreboard(
            slug=slug,
            title=r.get("title") or "스코어보드",
            academy_name=r.get("academy_name"),
            description=r.get("description"),
            categories=categories,
        )

    def scores(self, slug: str) -> Optional[tuple[str, list[ScoreEntry]]]:
        try:
            payload = self._client.get(f"/public/scoreboard/{slug}/scores")
        except NotFoundError:
            return None
        if payload is None:
            return None
        # Either a bare list or {"title": ..., "scores": [...]}.
        if isinstance(payload, list):
            return "전체 점수", [_entry(s) for s in payload if isinstance(s, dict)]
        item = unwrap_item(payload) or {}
        rows = item.get("scores") or []
        return item.get("title") or "전체 점수", [_entry(s) for s in rows if isinstance(s, dict)]
