from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int, as_str, unwrap_item, unwrap_list
from ..core.enums import TimeSlot
from .model import Schedule
from .repository import ScheduleRepository


class HttpScheduleRepository(HttpRepository, ScheduleRepository):
    base_path = "/schedules"

    def get(self, schedule_id: int) -> Optional[Schedule]:
        r = self.get_raw(schedule_id)
        if not r:
            return None
        try:
            time_slot = TimeSlot(r.get("time_slot"))
        except ValueError:
            time_slot = TimeSlot.AFTERNOON
        return Schedule(
            schedule_id=as_int(r.get("id")),
            name=r.get("name") or "",
            time_slot=time_slot,
            instructor_id=as_int(r["instructor_id"]) if r.get("instructor_id") else None,
            instructor_name=r.get("instructor_name"),
            start_time=as_str(r.get("start_time")),
            end_time=as_str(r.get("end_time")),
            capacity=as_int(r["capacity"]) if r.get("capacity") else None,
            memo=r.get("memo"),
        )

    def attendance(self, schedule_id: int, *, date: Optional[str] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(schedule_id), "attendance"), params={"date": date}))

    def mark_attendance(self, schedule_id: int, data: dict) -> None:
        self._client.post(self._path(int(schedule_id), "attendance"), data)

    def slot(self, *, date: str, instructor_id: Optional[int] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("slot"), params={"date": date, "instructor_id": instructor_id}))

    def stats(self, *, year_month: str) -> Optional[dict]:
        return unwrap_item(self._client.get(self._path("stats"), params={"year_month": year_month}))

    def instructor_month(self, *, year_month: str) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("instructor-schedules", "month"), params={"year_month": year_month}))

    def instructor_attendance_by_date(self, date: str) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("date", date, "instructor-attendance")))

    def mark_instructor_attendance(self, date: str, data: dict) -> None:
        self._client.post(self._path("date", date, "instructor-attendance"), data)
