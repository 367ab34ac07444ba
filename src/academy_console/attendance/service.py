from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, to_iso_date, today_local
from ..common.validators import compact, optional_text, require_choice
from ..core.enums import TimeSlot
from ..core.exceptions import ValidationError
from .repository import AttendanceRepository

STATUSES = ("present", "absent", "late", "excused")

STATUS_LABELS = {
    "present": "출석",
    "absent": "결석",
    "late": "지각",
    "excused": "공결",
}


def _check_date(value: Optional[str]) -> str:
    if not value:
        return to_iso_date(today_local())
    try:
        return parse_iso_date(value).isoformat()
    except ValueError:
        raise ValidationError("날짜 형식이 올바르지 않습니다")


def _check_year_month(year, month) -> tuple[int, int]:
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError("조회 연월이 올바르지 않습니다")
    if not 1 <= month <= 12:
        raise ValidationError("월은 1~12 사이여야 합니다")
    return year, month


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list(self, *, date: Optional[str] = None, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._attendance.list({"date": optional_text(date), "time_slot": optional_text(time_slot)})

    def by_student(self, student_id: int, *, year_month: Optional[str] = None) -> Sequence[dict]:
        return self._attendance.by_student(int(student_id), {"year_month": optional_text(year_month)})

    def daily(self, *, date: Optional[str] = None, time_slot: Optional[str] = None) -> Sequence[dict]:
        time_slot = optional_text(time_slot)
        if time_slot:
            require_choice(time_slot, [t.value for t in TimeSlot], "시간대 값이 올바르지 않습니다")
        return self._attendance.daily({"date": _check_date(date), "time_slot": time_slot})

    def summary(self, *, date: Optional[str] = None) -> dict:
        return self._attendance.summary({"date": _check_date(date)}) or {}

    def mark(self, *, student_id: int, date: str, status: str, time_slot: Optional[str] = None, memo: str = "") -> None:
        self._attendance.mark(
            compact(
                {
                    "student_id": int(student_id),
                    "date": _check_date(date),
                    "status": require_choice(status, STATUSES, "출결 상태가 올바르지 않습니다"),
                    "time_slot": optional_text(time_slot),
                    "memo": optional_text(memo),
                }
            )
        )

    def mark_batch(self, *, date: str, statuses: Mapping[int, str], time_slot: Optional[str] = None) -> int:
        """Save several students at once; returns the number of records sent."""
        records = [
            {"student_id": int(student_id), "status": require_choice(status, STATUSES, "출결 상태가 올바르지 않습니다")}
            for student_id, status in statuses.items()
        ]
        if not records:
            raise ValidationError("출결을 기록할 학생이 없습니다")
        self._attendance.mark(compact({"date": _check_date(date), "time_slot": optional_text(time_slot), "records": records}))
        return len(records)

    def monthly(self, *, year, month) -> Sequence[dict]:
        year, month = _check_year_month(year, month)
        return self._attendance.monthly(year=year, month=month)

    def monthly_summary(self, *, year, month) -> dict:
        year, month = _check_year_month(year, month)
        return self._attendance.monthly_summary(year=year, month=month) or {}
