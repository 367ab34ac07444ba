from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StaffMember


class StaffRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, staff_id: int) -> Optional[StaffMember]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, staff_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, staff_id: int) -> None:
        raise NotImplementedError

    def update_permissions(self, staff_id: int, permissions: dict) -> None:
        raise NotImplementedError

    def list_users(self, params: Optional[dict] = None) -> Sequence[dict]:
        """All console accounts across the organization (admin view)."""

        raise NotImplementedError
