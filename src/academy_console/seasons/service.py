from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import compact, optional_text, require_non_empty
from ..core.exceptions import ValidationError
from .model import Season
from .repository import SeasonRepository


class SeasonService:
    def __init__(self, seasons: SeasonRepository):
        self._seasons = seasons

    def list(self) -> Sequence[dict]:
        return self._seasons.list()

    def get(self, season_id: int) -> Optional[Season]:
        return self._seasons.get(int(season_id))

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        name = require_non_empty(form.get("name"), "시즌명을 입력하세요")
        start_s = require_non_empty(form.get("start_date"), "시작일을 선택하세요")
        end_s = require_non_empty(form.get("end_date"), "종료일을 선택하세요")
        try:
            start = parse_iso_date(start_s)
            end = parse_iso_date(end_s)
        except ValueError:
            raise ValidationError("날짜 형식이 올바르지 않습니다")
        if end < start:
            raise ValidationError("종료일은 시작일 이후여야 합니다")

        return compact(
            {
                "name": name,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "description": optional_text(form.get("description")),
            }
        )

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        return self._seasons.create(self._payload(form))

    def update(self, season_id: int, form: Mapping[str, str]) -> None:
        self._seasons.update(int(season_id), self._payload(form))

    def delete(self, season_id: int) -> None:
        self._seasons.delete(int(season_id))

    def enroll(self, season_id: int, student_ids: Iterable) -> int:
        """Register the selected students; returns how many were sent."""
        ids = sorted({int(s) for s in student_ids if str(s).strip()})
        if not ids:
            raise ValidationError("등록할 학생을 선택하세요")
        self._seasons.enroll(int(season_id), student_ids=ids)
        return len(ids)
