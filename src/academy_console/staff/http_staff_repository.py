from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int, unwrap_list
from ..core.enums import UserRole
from .model import StaffMember
from .repository import StaffRepository


class HttpStaffRepository(HttpRepository, StaffRepository):
    base_path = "/staff"

    def get(self, staff_id: int) -> Optional[StaffMember]:
        r = self.get_raw(staff_id)
        if not r:
            return None
        try:
            role = UserRole(r.get("role"))
        except ValueError:
            role = UserRole.STAFF
        permissions = r.get("permissions")
        return StaffMember(
            staff_id=as_int(r.get("id")),
            name=r.get("name") or "",
            email=r.get("email") or "",
            role=role,
            phone=r.get("phone"),
            permissions=permissions if isinstance(permissions, dict) else None,
            created_at=r.get("created_at"),
        )

    def update_permissions(self, staff_id: int, permissions: dict) -> None:
        self._client.put(self._path(int(staff_id), "permissions"), {"permissions": permissions})

    def list_users(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get("/admin/users", params=params))
