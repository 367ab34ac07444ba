from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import UserRole


@dataclass(frozen=True)
class StaffMember:
    staff_id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    permissions: Optional[dict] = None
    created_at: Optional[str] = None
