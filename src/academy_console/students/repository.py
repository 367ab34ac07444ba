from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, student_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, student_id: int) -> None:
        raise NotImplementedError

    def class_days(self, params: Optional[dict] = None) -> Sequence[dict]:
        """Weekly class days per student."""

        raise NotImplementedError
