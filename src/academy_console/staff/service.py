from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.validators import compact, optional_text, require_choice, require_min_length, require_non_empty
from ..core.enums import UserRole
from ..core.exceptions import ValidationError
from .model import StaffMember
from .permissions import PermissionMatrix, build_permission_matrix, toggle_permission
from .repository import StaffRepository

ASSIGNABLE_ROLES = (UserRole.ADMIN.value, UserRole.STAFF.value, UserRole.TEACHER.value)


class StaffService:
    """Use case: manage staff accounts and their permission grid."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def list(self, *, search: Optional[str] = None, role: Optional[str] = None) -> Sequence[dict]:
        return self._staff.list({"search": optional_text(search), "role": optional_text(role)})

    def list_users(self, *, search: Optional[str] = None) -> Sequence[dict]:
        return self._staff.list_users({"search": optional_text(search)})

    def get(self, staff_id: int) -> Optional[StaffMember]:
        return self._staff.get(int(staff_id))

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        name = (form.get("name") or "").strip()
        email = (form.get("email") or "").strip()
        password = form.get("password") or ""
        if not name or not email or not password:
            raise ValidationError("이름, 이메일, 비밀번호는 필수입니다")
        require_min_length(password, 6, "비밀번호는 6자 이상이어야 합니다")
        role = require_choice(form.get("role") or UserRole.STAFF.value, ASSIGNABLE_ROLES, "역할이 올바르지 않습니다")

        return self._staff.create(
            compact(
                {
                    "name": name,
                    "email": email,
                    "password": password,
                    "role": role,
                    "phone": optional_text(form.get("phone")),
                }
            )
        )

    def update(self, staff_id: int, form: Mapping[str, str]) -> None:
        data = {
            "name": require_non_empty(form.get("name"), "이름을 입력하세요"),
            "email": optional_text(form.get("email")),
            "phone": optional_text(form.get("phone")),
        }
        role = optional_text(form.get("role"))
        if role:
            data["role"] = require_choice(role, ASSIGNABLE_ROLES, "역할이 올바르지 않습니다")
        self._staff.update(int(staff_id), compact(data))

    def delete(self, staff_id: int) -> None:
        staff = self._staff.get(int(staff_id))
        if staff and staff.role == UserRole.OWNER:
            raise ValidationError("원장 계정은 삭제할 수 없습니다")
        self._staff.delete(int(staff_id))

    def permission_matrix(self, staff: StaffMember) -> PermissionMatrix:
        return build_permission_matrix(staff.permissions)

    def save_permissions(self, staff_id: int, matrix: PermissionMatrix) -> None:
        # Always send the complete grid so unchecked cells are revoked.
        self._staff.update_permissions(int(staff_id), build_permission_matrix(matrix))

    def toggle_cell(self, staff: StaffMember, page: str, action: str) -> PermissionMatrix:
        try:
            matrix = toggle_permission(self.permission_matrix(staff), page, action)
        except KeyError:
            raise ValidationError("알 수 없는 권한 항목입니다")
        self.save_permissions(staff.staff_id, matrix)
        return matrix
