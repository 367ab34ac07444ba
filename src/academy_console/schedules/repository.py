from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, schedule_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> None:
        raise NotImplementedError

    def attendance(self, schedule_id: int, *, date: Optional[str] = None) -> Sequence[dict]:
        raise NotImplementedError

    def mark_attendance(self, schedule_id: int, data: dict) -> None:
        raise NotImplementedError

    def slot(self, *, date: str, instructor_id: Optional[int] = None) -> Sequence[dict]:
        raise NotImplementedError

    def stats(self, *, year_month: str) -> Optional[dict]:
        raise NotImplementedError

    def instructor_month(self, *, year_month: str) -> Sequence[dict]:
        raise NotImplementedError

    def instructor_attendance_by_date(self, date: str) -> Sequence[dict]:
        raise NotImplementedError

    def mark_instructor_attendance(self, date: str, data: dict) -> None:
        raise NotImplementedError
