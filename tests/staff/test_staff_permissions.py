from __future__ import annotations

from typing import Optional

import pytest

from academy_console.core.enums import UserRole
from academy_console.core.exceptions import ValidationError
from academy_console.staff.model import StaffMember
from academy_console.staff.permissions import (
    ACTIONS,
    PERMISSION_PAGES,
    build_permission_matrix,
    cell_name,
    matrix_from_checked,
    toggle_permission,
)
from academy_console.staff.service import StaffService


class InMemoryStaff:
    def __init__(self, members: dict[int, StaffMember]):
        self.members = members
        self.created: list[dict] = []
        self.deleted: list[int] = []
        self.saved_permissions: dict[int, dict] = {}

    def list(self, params=None):
        return []

    def list_users(self, params=None):
        return []

    def get(self, staff_id: int) -> Optional[StaffMember]:
        return self.members.get(staff_id)

    def create(self, data: dict) -> Optional[int]:
        self.created.append(data)
        return 10

    def update(self, staff_id: int, data: dict) -> None:
        pass

    def delete(self, staff_id: int) -> None:
        self.deleted.append(staff_id)

    def update_permissions(self, staff_id: int, permissions: dict) -> None:
        self.saved_permissions[staff_id] = permissions


@pytest.fixture
def repo():
    return InMemoryStaff(
        {
            1: StaffMember(staff_id=1, name="원장", email="o@a.t", role=UserRole.OWNER),
            2: StaffMember(staff_id=2, name="강사", email="t@a.t", role=UserRole.TEACHER, permissions={"students": {"view": True}}),
        }
    )


def test_matrix_covers_every_page_and_action():
    matrix = build_permission_matrix({"students": {"view": True}, "unknown": {"view": True}})

    assert set(matrix) == set(PERMISSION_PAGES)
    assert all(set(row) == set(ACTIONS) for row in matrix.values())
    assert matrix["students"]["view"] is True
    assert matrix["students"]["edit"] is False


def test_toggle_returns_a_copy():
    matrix = build_permission_matrix(None)

    toggled = toggle_permission(matrix, "payments", "view")

    assert toggled["payments"]["view"] is True
    assert matrix["payments"]["view"] is False
    assert toggle_permission(toggled, "payments", "view")["payments"]["view"] is False


def test_toggle_unknown_cell():
    with pytest.raises(KeyError):
        toggle_permission(build_permission_matrix(None), "kitchen", "view")


def test_matrix_from_checked_boxes():
    matrix = matrix_from_checked([cell_name("students", "view"), cell_name("students", "edit"), "perm:bogus:view", "csrf"])

    assert matrix["students"] == {"view": True, "create": False, "edit": True, "delete": False}
    assert not any(matrix["payments"].values())


def test_save_permissions_sends_full_grid(repo):
    StaffService(repo).save_permissions(2, {"training": {"view": True}})

    saved = repo.saved_permissions[2]
    assert set(saved) == set(PERMISSION_PAGES)
    assert saved["training"]["view"] is True
    assert saved["students"]["view"] is False


def test_owner_cannot_be_deleted(repo):
    service = StaffService(repo)

    with pytest.raises(ValidationError):
        service.delete(1)

    service.delete(2)
    assert repo.deleted == [2]


def test_create_checks_role_and_password(repo):
    service = StaffService(repo)

    with pytest.raises(ValidationError):
        service.create({"name": "새직원", "email": "n@a.t", "password": "123"})
    with pytest.raises(ValidationError):
        service.create({"name": "새직원", "email": "n@a.t", "password": "secret1", "role": "owner"})

    assert service.create({"name": "새직원", "email": "n@a.t", "password": "secret1"}) == 10
    assert repo.created[-1]["role"] == "staff"


def test_toggle_cell_saves_the_whole_grid(repo):
    matrix = StaffService(repo).toggle_cell(repo.members[2], "payments", "view")

    assert repo.saved_permissions[2] == matrix
    assert matrix["payments"]["view"] is True
    assert matrix["students"]["view"] is True
    assert set(matrix) == set(PERMISSION_PAGES)


def test_toggle_cell_rejects_unknown_cell(repo):
    with pytest.raises(ValidationError):
        StaffService(repo).toggle_cell(repo.members[2], "kitchen", "view")

    assert repo.saved_permissions == {}
