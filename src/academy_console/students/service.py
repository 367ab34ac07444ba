from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.validators import compact, optional_text, require_choice, require_non_empty
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.enums import StudentStatus, TimeSlot
from .model import Student
from .repository import StudentRepository

_STATUSES = [s.value for s in StudentStatus]
_TIME_SLOTS = [t.value for t in TimeSlot]


class StudentService:
    def __init__(self, students: StudentRepository):
        self._students = students

    def list(
        self,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        time_slot: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> Sequence[dict]:
        status = optional_text(status)
        time_slot = optional_text(time_slot)
        if status:
            require_choice(status, _STATUSES, "상태 값이 올바르지 않습니다")
        if time_slot:
            require_choice(time_slot, _TIME_SLOTS, "시간대 값이 올바르지 않습니다")
        return self._students.list(
            {"search": optional_text(search), "status": status, "time_slot": time_slot, "page": max(1, int(page)), "limit": limit}
        )

    def get(self, student_id: int) -> Optional[Student]:
        return self._students.get(int(student_id))

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        time_slot = optional_text(form.get("time_slot"))
        if time_slot:
            require_choice(time_slot, _TIME_SLOTS, "시간대 값이 올바르지 않습니다")
        return {
            "name": require_non_empty(form.get("name"), "이름을 입력하세요"),
            "phone": optional_text(form.get("phone")),
            "parent_phone": optional_text(form.get("parent_phone")),
            "school": optional_text(form.get("school")),
            "grade": optional_text(form.get("grade")),
            "time_slot": time_slot,
            "memo": optional_text(form.get("memo")),
        }

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        data = self._payload(form)
        # New students always start enrolled.
        data["status"] = StudentStatus.ACTIVE.value
        return self._students.create(compact(data))

    def update(self, student_id: int, form: Mapping[str, str]) -> None:
        data = self._payload(form)
        data["status"] = require_choice(form.get("status"), _STATUSES, "상태 값이 올바르지 않습니다")
        self._students.update(int(student_id), compact(data))

    def delete(self, student_id: int) -> None:
        self._students.delete(int(student_id))

    def class_days(self, *, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._students.class_days({"time_slot": optional_text(time_slot)})
