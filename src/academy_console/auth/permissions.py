from __future__ import annotations

from typing import Optional

from ..core.enums import UserRole
from .model import User

CORE_MODULE = "core"


def has_permission(user: Optional[User], page: str, action: str = "view") -> bool:
    """Owners and admins can do everything; others follow their permission grid."""
    if user is None:
        return False
    if user.role in (UserRole.OWNER, UserRole.ADMIN):
        return True
    page_perms = (user.permissions or {}).get(page) or {}
    return bool(page_perms.get(action, False))


def has_module(user: Optional[User], module: str) -> bool:
    if user is None:
        return False
    if module == CORE_MODULE:
        return True
    return module in user.modules
