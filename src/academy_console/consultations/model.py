from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import DEFAULT_CONSULTATION_MINUTES
from ..core.enums import ConsultationStatus


@dataclass(frozen=True)
class Consultation:
    consultation_id: int
    name: str
    phone: str
    status: ConsultationStatus
    school: Optional[str] = None
    grade: Optional[str] = None
    sport_interest: Optional[str] = None
    memo: Optional[str] = None
    notes: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    reservation_number: Optional[str] = None
    student_id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class BlockedSlot:
    slot_id: int
    date: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    def as_mapping(self) -> dict:
        return {"date": self.date, "start_time": self.start_time, "end_time": self.end_time, "reason": self.reason}


@dataclass(frozen=True)
class ConsultationSettings:
    slug: str = ""
    is_active: bool = True
    duration_minutes: int = DEFAULT_CONSULTATION_MINUTES
    max_per_slot: int = 1
    fields: dict = field(default_factory=lambda: {
        "school": True,
        "grade": True,
        "sport_interest": True,
        "preferred_date": True,
    })
    notify_on_new: bool = True
    notify_email: str = ""
    weekly_hours: dict = field(default_factory=dict)
    blocked_slots: tuple[BlockedSlot, ...] = ()


@dataclass(frozen=True)
class PublicBookingForm:
    """What the unauthenticated booking page needs for one academy slug."""

    slug: str
    academy_name: str
    description: Optional[str]
    duration_minutes: int
    fields: dict
    weekly_hours: dict
    blocked_slots: tuple[dict, ...]

    def shows(self, field_name: str) -> bool:
        # Optional fields are on unless explicitly switched off.
        return self.fields.get(field_name) is not False


@dataclass(frozen=True)
class Reservation:
    reservation_number: str
    name: str
    status: ConsultationStatus
    academy_name: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    created_at: Optional[str] = None
