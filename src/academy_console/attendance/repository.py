from __future__ import annotations

from typing import Optional, Protocol, Sequence


class AttendanceRepository(Protocol):
    """Student attendance endpoints (``/attendance``)."""

    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def by_student(self, student_id: int, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def daily(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def summary(self, params: Optional[dict] = None) -> Optional[dict]:
        raise NotImplementedError

    def mark(self, data: dict) -> None:
        raise NotImplementedError

    def monthly(self, *, year: int, month: int) -> Sequence[dict]:
        raise NotImplementedError

    def monthly_summary(self, *, year: int, month: int) -> Optional[dict]:
        raise NotImplementedError
