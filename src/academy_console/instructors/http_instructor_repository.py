from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int, as_str, unwrap_list
from .model import Instructor
from .repository import InstructorRepository


class HttpInstructorRepository(HttpRepository, InstructorRepository):
    base_path = "/instructors"

    def get(self, instructor_id: int) -> Optional[Instructor]:
        r = self.get_raw(instructor_id)
        if not r:
            return None
        return Instructor(
            instructor_id=as_int(r.get("id")),
            name=r.get("name") or "",
            phone=r.get("phone"),
            email=r.get("email"),
            specialty=r.get("specialty"),
            experience=as_str(r.get("experience")),
            memo=r.get("memo"),
            created_at=as_str(r.get("created_at")),
        )

    def available(self, *, date: str, time_slot: str) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("available"), params={"date": date, "time_slot": time_slot}))

    def attendance(self, instructor_id: int, *, year_month: str) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(instructor_id), "attendance"), params={"year_month": year_month}))

    def mark_attendance(self, instructor_id: int, data: dict) -> None:
        self._client.post(self._path(int(instructor_id), "attendance"), data)

    def overtime(self, instructor_id: int, *, year_month: Optional[str] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(instructor_id), "overtime"), params={"year_month": year_month}))

    def create_overtime(self, instructor_id: int, data: dict) -> None:
        self._client.post(self._path(int(instructor_id), "overtime"), data)

    def pending_overtimes(self) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("overtime", "pending")))

    def approve_overtime(self, overtime_id: int, data: dict) -> None:
        self._client.put(self._path("overtime", int(overtime_id), "approve"), data)
