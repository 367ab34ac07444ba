from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int, as_str, unwrap_list
from ..core.enums import StudentStatus, TimeSlot
from .model import Student
from .repository import StudentRepository


class HttpStudentRepository(HttpRepository, StudentRepository):
    base_path = "/students"

    def get(self, student_id: int) -> Optional[Student]:
        r = self.get_raw(student_id)
        if not r:
            return None
        try:
            status = StudentStatus(r.get("status"))
        except ValueError:
            status = StudentStatus.PENDING
        try:
            time_slot = TimeSlot(r["time_slot"]) if r.get("time_slot") else None
        except ValueError:
            time_slot = None
        return Student(
            student_id=as_int(r.get("id")),
            name=r.get("name") or "",
            status=status,
            phone=r.get("phone"),
            parent_phone=r.get("parent_phone"),
            school=r.get("school"),
            grade=as_str(r.get("grade")),
            time_slot=time_slot,
            memo=r.get("memo"),
            created_at=as_str(r.get("created_at")),
            updated_at=as_str(r.get("updated_at")),
        )

    def class_days(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("class-days"), params=params))
