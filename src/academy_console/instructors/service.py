from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import current_year_month, parse_hhmm
from ..common.validators import (
    compact,
    optional_text,
    require_choice,
    require_non_empty,
    require_year_month,
)
from ..core.enums import TimeSlot
from ..core.exceptions import ValidationError
from .model import Instructor
from .repository import InstructorRepository

ATTENDANCE_STATUSES = ("present", "absent", "late", "half_day")


class InstructorService:
    def __init__(self, instructors: InstructorRepository):
        self._instructors = instructors

    def list(self, *, search: Optional[str] = None) -> Sequence[dict]:
        return self._instructors.list({"search": optional_text(search)})

    def get(self, instructor_id: int) -> Optional[Instructor]:
        return self._instructors.get(int(instructor_id))

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        return compact(
            {
                "name": require_non_empty(form.get("name"), "이름을 입력하세요"),
                "phone": optional_text(form.get("phone")),
                "email": optional_text(form.get("email")),
                "specialty": optional_text(form.get("specialty")),
                "experience": optional_text(form.get("experience")),
                "memo": optional_text(form.get("memo")),
            }
        )

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        return self._instructors.create(self._payload(form))

    def update(self, instructor_id: int, form: Mapping[str, str]) -> None:
        self._instructors.update(int(instructor_id), self._payload(form))

    def delete(self, instructor_id: int) -> None:
        self._instructors.delete(int(instructor_id))

    def available(self, *, date: str, time_slot: str) -> Sequence[dict]:
        require_non_empty(date, "날짜를 선택하세요")
        require_choice(time_slot, [t.value for t in TimeSlot], "시간대 값이 올바르지 않습니다")
        return self._instructors.available(date=date, time_slot=time_slot)

    def monthly_attendance(self, instructor_id: int, *, year_month: Optional[str] = None) -> Sequence[dict]:
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._instructors.attendance(int(instructor_id), year_month=year_month)

    def mark_attendance(self, instructor_id: int, *, date: str, status: str, time_slot: Optional[str] = None) -> None:
        data = {
            "date": require_non_empty(date, "날짜를 선택하세요"),
            "status": require_choice(status, ATTENDANCE_STATUSES, "출근 상태가 올바르지 않습니다"),
            "time_slot": optional_text(time_slot),
        }
        self._instructors.mark_attendance(int(instructor_id), compact(data))

    def overtime(self, instructor_id: int, *, year_month: Optional[str] = None) -> Sequence[dict]:
        return self._instructors.overtime(int(instructor_id), year_month=optional_text(year_month))

    def request_overtime(self, instructor_id: int, *, date: str, start_time: str, end_time: str, reason: str = "") -> None:
        start = parse_hhmm(start_time)
        end = parse_hhmm(end_time)
        if start is None or end is None:
            raise ValidationError("시간 형식이 올바르지 않습니다 (HH:MM)")
        if end <= start:
            raise ValidationError("종료 시간은 시작 시간 이후여야 합니다")
        self._instructors.create_overtime(
            int(instructor_id),
            compact(
                {
                    "date": require_non_empty(date, "날짜를 선택하세요"),
                    "start_time": start_time.strip(),
                    "end_time": end_time.strip(),
                    "reason": optional_text(reason),
                }
            ),
        )

    def pending_overtimes(self) -> Sequence[dict]:
        return self._instructors.pending_overtimes()

    def decide_overtime(self, overtime_id: int, *, approved: bool, memo: str = "") -> None:
        self._instructors.approve_overtime(
            int(overtime_id),
            compact({"status": "approved" if approved else "rejected", "memo": optional_text(memo)}),
        )
