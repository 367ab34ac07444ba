from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Instructor


class InstructorRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, instructor_id: int) -> Optional[Instructor]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, instructor_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, instructor_id: int) -> None:
        raise NotImplementedError

    def available(self, *, date: str, time_slot: str) -> Sequence[dict]:
        raise NotImplementedError

    def attendance(self, instructor_id: int, *, year_month: str) -> Sequence[dict]:
        raise NotImplementedError

    def mark_attendance(self, instructor_id: int, data: dict) -> None:
        raise NotImplementedError

    def overtime(self, instructor_id: int, *, year_month: Optional[str] = None) -> Sequence[dict]:
        raise NotImplementedError

    def create_overtime(self, instructor_id: int, data: dict) -> None:
        raise NotImplementedError

    def pending_overtimes(self) -> Sequence[dict]:
        raise NotImplementedError

    def approve_overtime(self, overtime_id: int, data: dict) -> None:
        raise NotImplementedError
