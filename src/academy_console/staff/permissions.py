"""Staff permission grid (page x action check boxes)."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

PERMISSION_PAGES = (
    "students",
    "attendance",
    "schedules",
    "seasons",
    "instructors",
    "payments",
    "salaries",
    "incomes",
    "expenses",
    "consultations",
    "training",
    "reports",
    "staff",
    "notifications",
)

PAGE_LABELS = {
    "students": "학생관리",
    "attendance": "출결",
    "schedules": "수업",
    "seasons": "시즌",
    "instructors": "강사",
    "payments": "수납",
    "salaries": "급여",
    "incomes": "수입",
    "expenses": "지출",
    "consultations": "상담",
    "training": "훈련",
    "reports": "리포트",
    "staff": "직원",
    "notifications": "SMS",
}

ACTIONS = ("view", "create", "edit", "delete")

ACTION_LABELS = {"view": "조회", "create": "등록", "edit": "수정", "delete": "삭제"}

PermissionMatrix = dict[str, dict[str, bool]]


def build_permission_matrix(existing: Optional[Mapping[str, Mapping[str, bool]]]) -> PermissionMatrix:
    """Full grid for the editor; cells missing from the staff record are off."""
    existing = existing or {}
    matrix: PermissionMatrix = {}
    for page in PERMISSION_PAGES:
        page_perms = existing.get(page) or {}
        matrix[page] = {action: bool(page_perms.get(action, False)) for action in ACTIONS}
    return matrix


def toggle_permission(matrix: Mapping[str, Mapping[str, bool]], page: str, action: str) -> PermissionMatrix:
    """Return a copy of the grid with one cell flipped."""
    if page not in PERMISSION_PAGES or action not in ACTIONS:
        raise KeyError(f"unknown permission cell {page}.{action}")
    out = {p: dict(actions) for p, actions in matrix.items()}
    row = out.setdefault(page, {a: False for a in ACTIONS})
    row[action] = not row.get(action, False)
    return out


def cell_name(page: str, action: str) -> str:
    return f"perm:{page}:{action}"


def matrix_from_checked(checked: Iterable[str]) -> PermissionMatrix:
    """Grid from the names of checked boxes (``perm:<page>:<action>``)."""
    matrix = build_permission_matrix(None)
    for name in checked:
        parts = name.split(":")
        if len(parts) != 3 or parts[0] != "perm":
            continue
        _, page, action = parts
        if page in matrix and action in matrix[page]:
            matrix[page][action] = True
    return matrix
