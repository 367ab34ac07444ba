from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, unwrap_item, unwrap_list
from .repository import AttendanceRepository


class HttpAttendanceRepository(HttpRepository, AttendanceRepository):
    base_path = "/attendance"

    def by_student(self, student_id: int, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("student", int(student_id)), params=params))

    def daily(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("daily"), params=params))

    def summary(self, params: Optional[dict] = None) -> Optional[dict]:
        return unwrap_item(self._client.get(self._path("summary"), params=params))

    def mark(self, data: dict) -> None:
        # Single marks and batches share the same endpoint.
        self._client.post(self.base_path, data)

    def monthly(self, *, year: int, month: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("monthly"), params={"year": year, "month": month}))

    def monthly_summary(self, *, year: int, month: int) -> Optional[dict]:
        return unwrap_item(self._client.get(self._path("monthly", "summary"), params={"year": year, "month": month}))
