from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from ..core.enums import UserRole


@dataclass(frozen=True)
class User:
    """The signed-in console user as returned by ``/auth/me``.

    ``permissions`` maps a page key to action flags, e.g.
    ``{"students": {"view": True, "edit": False}}``; None for owners/admins.
    """

    user_id: int
    email: str
    name: str
    role: UserRole
    academy_id: Optional[int]
    permissions: Optional[dict] = None
    modules: tuple[str, ...] = field(default_factory=tuple)

    def to_session(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        data["modules"] = list(self.modules)
        return data


@dataclass(frozen=True)
class LoginResult:
    token: str
    refresh_token: Optional[str]
    user: User


def user_from_payload(r: Mapping[str, Any]) -> User:
    """Build a User from an API payload or from its session copy."""
    try:
        role = UserRole(r.get("role"))
    except ValueError:
        role = UserRole.STAFF

    academy_id = r.get("academy_id")
    permissions = r.get("permissions")
    return User(
        user_id=int(r.get("id") or r.get("user_id") or 0),
        email=r.get("email") or "",
        name=r.get("name") or "",
        role=role,
        academy_id=int(academy_id) if academy_id not in (None, "") else None,
        permissions=permissions if isinstance(permissions, dict) else None,
        modules=tuple(r.get("modules") or ()),
    )
