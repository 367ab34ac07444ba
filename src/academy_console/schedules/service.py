from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import current_year_month, parse_hhmm
from ..common.validators import (
    compact,
    optional_int,
    optional_text,
    require_choice,
    require_non_empty,
    require_year_month,
)
from ..core.enums import TimeSlot
from ..core.exceptions import ValidationError
from .model import Schedule
from .repository import ScheduleRepository

STUDENT_ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def list(self, *, year_month: Optional[str] = None, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._schedules.list({"year_month": optional_text(year_month), "time_slot": optional_text(time_slot)})

    def get(self, schedule_id: int) -> Optional[Schedule]:
        return self._schedules.get(int(schedule_id))

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        name = require_non_empty(form.get("name"), "수업명을 입력하세요")
        time_slot = require_choice(form.get("time_slot"), [t.value for t in TimeSlot], "시간대를 선택하세요")

        start_time = optional_text(form.get("start_time"))
        end_time = optional_text(form.get("end_time"))
        for value in (start_time, end_time):
            if value and parse_hhmm(value) is None:
                raise ValidationError("시간 형식이 올바르지 않습니다 (HH:MM)")
        if start_time and end_time and parse_hhmm(end_time) <= parse_hhmm(start_time):
            raise ValidationError("종료 시간은 시작 시간 이후여야 합니다")

        capacity = optional_int(form.get("capacity"), "정원은 숫자로 입력하세요")
        if capacity is not None and capacity < 1:
            raise ValidationError("정원은 1명 이상이어야 합니다")

        return compact(
            {
                "name": name,
                "instructor_id": optional_int(form.get("instructor_id"), "강사를 다시 선택하세요"),
                "time_slot": time_slot,
                "start_time": start_time,
                "end_time": end_time,
                "capacity": capacity,
                "memo": optional_text(form.get("memo")),
            }
        )

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        return self._schedules.create(self._payload(form))

    def update(self, schedule_id: int, form: Mapping[str, str]) -> None:
        self._schedules.update(int(schedule_id), self._payload(form))

    def delete(self, schedule_id: int) -> None:
        self._schedules.delete(int(schedule_id))

    def attendance(self, schedule_id: int, *, date: Optional[str] = None) -> Sequence[dict]:
        return self._schedules.attendance(int(schedule_id), date=optional_text(date))

    def mark_attendance(self, schedule_id: int, *, date: str, statuses: Mapping[int, str]) -> None:
        """Save one attendance status per student for a class date."""
        date = require_non_empty(date, "날짜를 선택하세요")
        records = []
        for student_id, status in statuses.items():
            require_choice(status, STUDENT_ATTENDANCE_STATUSES, "출결 상태가 올바르지 않습니다")
            records.append({"student_id": int(student_id), "status": status})
        if not records:
            raise ValidationError("출결을 기록할 학생이 없습니다")
        self._schedules.mark_attendance(int(schedule_id), {"date": date, "records": records})

    def slot(self, *, date: str, instructor_id: Optional[int] = None) -> Sequence[dict]:
        return self._schedules.slot(date=require_non_empty(date, "날짜를 선택하세요"), instructor_id=instructor_id)

    def stats(self, *, year_month: Optional[str] = None) -> dict:
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._schedules.stats(year_month=year_month) or {}

    def instructor_month(self, *, year_month: Optional[str] = None) -> Sequence[dict]:
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._schedules.instructor_month(year_month=year_month)

    def instructor_attendance(self, date: str) -> Sequence[dict]:
        return self._schedules.instructor_attendance_by_date(require_non_empty(date, "날짜를 선택하세요"))

    def mark_instructor_attendance(self, date: str, records: Sequence[dict]) -> None:
        self._schedules.mark_instructor_attendance(require_non_empty(date, "날짜를 선택하세요"), {"records": list(records)})
