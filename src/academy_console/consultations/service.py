from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import compact, optional_text, require_choice, require_non_empty, require_positive_int
from ..core.constants import WEEKDAY_KEYS
from ..core.enums import ConsultationStatus
from ..core.exceptions import ValidationError
from .availability import BookingAvailability
from .model import BlockedSlot, Consultation, ConsultationSettings
from .repository import ConsultationRepository

_RANGE_FORMAT = re.compile(r"^\d{2}:\d{2}-\d{2}:\d{2}$")

_SLUG_FORMAT = re.compile(r"^[a-z0-9][a-z0-9-]{1,48}[a-z0-9]$")

CONDUCT_RESULTS = {
    "pending": "보류",
    "enrolled": "등록",
    "rejected": "거절",
    "trial": "체험 신청",
}


class ConsultationService:
    """Use cases of the consultation screens (signed-in console)."""

    def __init__(self, consultations: ConsultationRepository):
        self._consultations = consultations

    def list(self, *, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[dict]:
        if status == "all":
            status = None
        if status:
            require_choice(status, [s.value for s in ConsultationStatus], "상태 값이 올바르지 않습니다")
        return self._consultations.list({"status": status, "search": optional_text(search)})

    def get(self, consultation_id: int) -> Optional[Consultation]:
        return self._consultations.get(int(consultation_id))

    @staticmethod
    def _inquiry_payload(form: Mapping[str, str]) -> dict:
        name = (form.get("name") or "").strip()
        phone = (form.get("phone") or "").strip()
        if not name or not phone:
            raise ValidationError("이름과 연락처는 필수입니다")

        return compact(
            {
                "name": name,
                "phone": phone,
                "school": optional_text(form.get("school")),
                "grade": optional_text(form.get("grade")),
                "sport_interest": optional_text(form.get("sport_interest")),
                "memo": optional_text(form.get("memo")),
                "preferred_date": optional_text(form.get("preferred_date")),
                "preferred_time": optional_text(form.get("preferred_time")),
            }
        )

    def create_inquiry(self, form: Mapping[str, str]) -> Optional[int]:
        return self._consultations.create(self._inquiry_payload(form))

    def update(self, consultation_id: int, form: Mapping[str, str]) -> None:
        data = self._inquiry_payload(form)
        status = form.get("status")
        if status:
            data["status"] = require_choice(status, [s.value for s in ConsultationStatus], "상태 값이 올바르지 않습니다")
        self._consultations.update(int(consultation_id), data)

    def delete(self, consultation_id: int) -> None:
        self._consultations.delete(int(consultation_id))

    def conduct(self, consultation_id: int, *, notes: str, result: str, follow_up_date: str = "") -> None:
        result = result or "pending"
        require_choice(result, CONDUCT_RESULTS, "상담 결과가 올바르지 않습니다")

        follow_up = optional_text(follow_up_date)
        if follow_up:
            try:
                parse_iso_date(follow_up)
            except ValueError:
                raise ValidationError("후속 상담일 형식이 올바르지 않습니다")

        self._consultations.conduct(
            int(consultation_id),
            compact({"notes": (notes or "").strip(), "result": result, "follow_up_date": follow_up}),
        )

    def convert_to_student(self, consultation_id: int) -> Optional[int]:
        return self._consultations.convert(int(consultation_id))

    def link_student(self, consultation_id: int, student_id: int) -> None:
        student_id = require_positive_int(student_id, "학생을 선택하세요")
        self._consultations.link_student(int(consultation_id), {"student_id": student_id})

    def calendar(self, *, year_month: Optional[str] = None) -> Sequence[dict]:
        return self._consultations.calendar({"year_month": year_month})

    def enrolled(self) -> Sequence[dict]:
        return self._consultations.enrolled()


class ConsultationSettingsService:
    """Booking form settings: slug, weekly open hours and blocked dates."""

    def __init__(self, consultations: ConsultationRepository):
        self._consultations = consultations

    def get(self) -> ConsultationSettings:
        return self._consultations.get_settings() or ConsultationSettings()

    def update(
        self,
        *,
        slug: str,
        is_active: bool,
        duration_minutes: int,
        max_per_slot: int,
        fields: Mapping[str, bool],
        notify_on_new: bool,
        notify_email: str = "",
    ) -> None:
        slug = require_non_empty(slug, "공개 주소를 입력하세요").lower()
        if not _SLUG_FORMAT.match(slug):
            raise ValidationError("공개 주소는 영문 소문자, 숫자, '-'만 사용할 수 있습니다")

        data = {
            "slug": slug,
            "is_active": bool(is_active),
            "duration_minutes": require_positive_int(duration_minutes, "상담 시간은 1분 이상이어야 합니다"),
            "max_per_slot": require_positive_int(max_per_slot, "슬롯당 인원은 1명 이상이어야 합니다"),
            "fields": {k: bool(v) for k, v in fields.items()},
            "notify_on_new": bool(notify_on_new),
            "notify_email": (notify_email or "").strip(),
        }
        self._consultations.update_settings(data)

    def is_slug_available(self, slug: str) -> bool:
        return self._consultations.check_slug(require_non_empty(slug, "공개 주소를 입력하세요").lower())

    @staticmethod
    def normalize_weekly_hours(weekly_hours: Mapping[str, Sequence[str]]) -> dict:
        """Validate ``HH:MM-HH:MM`` entries per weekday; empty days are dropped."""
        out: dict[str, list[str]] = {}
        for key, ranges in weekly_hours.items():
            if key not in WEEKDAY_KEYS:
                raise ValidationError("요일 값이 올바르지 않습니다")
            cleaned = [r.strip() for r in ranges if r and r.strip()]
            for r in cleaned:
                if not _RANGE_FORMAT.match(r):
                    raise ValidationError("형식: HH:MM-HH:MM")
            if cleaned:
                out[key] = cleaned
        return out

    def update_weekly_hours(self, weekly_hours: Mapping[str, Sequence[str]]) -> dict:
        normalized = self.normalize_weekly_hours(weekly_hours)
        self._consultations.update_weekly_hours(normalized)
        return normalized

    def add_blocked_slot(self, *, date: str, start_time: str = "09:00", end_time: str = "18:00", reason: str = "") -> Optional[BlockedSlot]:
        day = require_non_empty(date, "날짜를 선택하세요")
        try:
            parse_iso_date(day)
        except ValueError:
            raise ValidationError("날짜 형식이 올바르지 않습니다")

        return self._consultations.add_blocked_slot(
            compact(
                {
                    "date": day,
                    "start_time": optional_text(start_time),
                    "end_time": optional_text(end_time),
                    "reason": optional_text(reason),
                }
            )
        )

    def remove_blocked_slot(self, slot_id: int) -> None:
        self._consultations.remove_blocked_slot(int(slot_id))

    def preview(self, settings: ConsultationSettings) -> BookingAvailability:
        """Availability as the public form will compute it, for the settings page."""
        return BookingAvailability(
            weekly_hours=settings.weekly_hours,
            duration_minutes=settings.duration_minutes or 30,
            blocked_slots=tuple(b.as_mapping() for b in settings.blocked_slots),
        )
