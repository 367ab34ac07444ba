from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import TimeSlot

MODULE_OPTIONS = {
    "training": "훈련 모듈",
    "consultation": "상담 모듈",
    "finance": "재무 모듈",
}

TUITION_CATEGORIES = ("exam", "adult")
WEEKLY_KEYS = tuple(f"weekly_{n}" for n in range(1, 8))

DEFAULT_SLOT_HOURS = {
    TimeSlot.MORNING.value: ("06:00", "12:00"),
    TimeSlot.AFTERNOON.value: ("12:00", "18:00"),
    TimeSlot.EVENING.value: ("18:00", "22:00"),
}

NOTIFICATION_PROVIDERS = ("solapi", "sens")


def parse_json_field(raw: Any, fallback: dict) -> dict:
    """Settings blobs arrive either as objects or as JSON-encoded strings."""
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        try:
            value = json.loads(raw)
        except ValueError:
            return dict(fallback)
        return value if isinstance(value, dict) else dict(fallback)
    return dict(fallback)


def default_tuition() -> dict:
    return {category: {k: 0 for k in WEEKLY_KEYS} for category in TUITION_CATEGORIES}


@dataclass(frozen=True)
class AcademySettings:
    name: str = ""
    phone: str = ""
    address: str = ""
    modules: tuple[str, ...] = ()
    slot_hours: dict = field(default_factory=lambda: dict(DEFAULT_SLOT_HOURS))
    payment_due_day: int = 10
    tuition_settings: dict = field(default_factory=default_tuition)
    season_fees: dict = field(default_factory=lambda: {"exam_early": 0, "exam_regular": 0, "civil_service": 0})
    salary_settings: dict = field(default_factory=lambda: {"payment_day": 10, "month_type": "next"})


@dataclass(frozen=True)
class NotificationSettings:
    provider: str = "solapi"
    credentials: dict = field(default_factory=dict)


@dataclass(frozen=True)
class AcademyEvent:
    title: str
    start_date: str
    end_date: Optional[str] = None
    description: Optional[str] = None
    event_type: str = "holiday"
    event_id: Optional[int] = None
