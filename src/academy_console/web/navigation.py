"""Sidebar menu, filtered by enabled modules and page permissions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..auth.model import User
from ..auth.permissions import has_module, has_permission


@dataclass(frozen=True)
class MenuItem:
    label: str
    endpoint: str
    permission: Optional[str] = None


@dataclass(frozen=True)
class MenuSection:
    title: str
    module: str
    items: tuple[MenuItem, ...]


MENU_SECTIONS = (
    MenuSection(
        "학원 운영",
        "core",
        (
            MenuItem("대시보드", "dashboard"),
            MenuItem("학생관리", "students", "students"),
            MenuItem("출결관리", "attendance", "attendance"),
            MenuItem("수업일정", "schedules", "schedules"),
            MenuItem("시즌관리", "seasons", "seasons"),
            MenuItem("강사관리", "instructors", "instructors"),
        ),
    ),
    MenuSection(
        "재무",
        "finance",
        (
            MenuItem("수납관리", "payments", "payments"),
            MenuItem("급여관리", "salaries", "salaries"),
            MenuItem("수입관리", "incomes", "incomes"),
            MenuItem("지출관리", "expenses", "expenses"),
        ),
    ),
    MenuSection(
        "상담",
        "consultation",
        (MenuItem("상담관리", "consultations", "consultations"),),
    ),
    MenuSection(
        "훈련",
        "training",
        (
            MenuItem("측정기록", "training_records", "training"),
            MenuItem("훈련계획", "training_plans", "training"),
            MenuItem("훈련일지", "training_logs", "training"),
            MenuItem("운동관리", "training_exercises", "training"),
            MenuItem("프리셋", "training_presets", "training"),
            MenuItem("월간테스트", "training_tests", "training"),
            MenuItem("반배정", "training_assignments", "training"),
            MenuItem("통계", "training_stats", "training"),
        ),
    ),
    MenuSection(
        "관리",
        "admin",
        (
            MenuItem("리포트", "reports", "reports"),
            MenuItem("설정", "settings"),
            MenuItem("직원관리", "staff", "staff"),
            MenuItem("SMS", "sms", "notifications"),
        ),
    ),
)


def visible_menu(user: Optional[User]) -> list[MenuSection]:
    """Sections and items the user may see; empty sections are dropped."""
    if user is None:
        return []

    out = []
    for section in MENU_SECTIONS:
        if not has_module(user, section.module):
            continue
        items = tuple(i for i in section.items if i.permission is None or has_permission(user, i.permission, "view"))
        if items:
            out.append(MenuSection(section.title, section.module, items))
    return out
