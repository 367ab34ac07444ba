from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import compact, optional_text
from ..core.exceptions import ValidationError
from .availability import BookingAvailability, min_selectable_date
from .model import PublicBookingForm, Reservation
from .repository import PublicConsultationRepository

GRADE_OPTIONS = ("중1", "중2", "중3", "고1", "고2", "고3")


@dataclass(frozen=True)
class DayAvailability:
    date: str
    available: bool
    slots: list[str]


class PublicBookingService:
    """Use case: public (slug-addressed) consultation booking."""

    def __init__(self, consultations: PublicConsultationRepository):
        self._consultations = consultations

    def load_form(self, slug: str) -> Optional[PublicBookingForm]:
        return self._consultations.get_public_form(slug)

    @staticmethod
    def availability_for(form: PublicBookingForm) -> BookingAvailability:
        return BookingAvailability(
            weekly_hours=form.weekly_hours,
            duration_minutes=form.duration_minutes,
            blocked_slots=form.blocked_slots,
        )

    def day_availability(self, form: PublicBookingForm, candidate: str, *, today: Optional[date] = None) -> DayAvailability:
        try:
            day = parse_iso_date(candidate)
        except (AttributeError, ValueError):
            raise ValidationError("날짜 형식이 올바르지 않습니다")

        if day < min_selectable_date(today or today_local()):
            return DayAvailability(date=day.isoformat(), available=False, slots=[])

        availability = self.availability_for(form)
        available = availability.is_date_available(day)
        return DayAvailability(
            date=day.isoformat(),
            available=available,
            slots=availability.generate_slots(day) if available else [],
        )

    def submit(self, form: PublicBookingForm, data: Mapping[str, str], *, today: Optional[date] = None) -> Optional[str]:
        """Validate and submit a booking; returns the reservation number."""

        name = (data.get("name") or "").strip()
        phone = (data.get("phone") or "").strip()
        if not name or not phone:
            raise ValidationError("이름과 연락처는 필수입니다")

        grade = optional_text(data.get("grade"))
        if grade and grade not in GRADE_OPTIONS:
            raise ValidationError("학년을 다시 선택해주세요")

        preferred_date = optional_text(data.get("preferred_date"))
        preferred_time = optional_text(data.get("preferred_time"))
        if preferred_date and form.shows("preferred_date"):
            day = self.day_availability(form, preferred_date, today=today)
            if not day.available:
                raise ValidationError("선택한 날짜는 상담이 불가능합니다")
            if preferred_time and day.slots and preferred_time not in day.slots:
                raise ValidationError("선택한 시간은 상담이 불가능합니다")
        else:
            preferred_date = None
            preferred_time = None

        payload = compact(
            {
                "name": name,
                "phone": phone,
                "school": optional_text(data.get("school")) if form.shows("school") else None,
                "grade": grade if form.shows("grade") else None,
                "sport_interest": optional_text(data.get("sport_interest")) if form.shows("sport_interest") else None,
                "memo": optional_text(data.get("memo")),
                "preferred_date": preferred_date,
                "preferred_time": preferred_time,
            }
        )
        return self._consultations.submit_public(form.slug, payload)

    def lookup_reservation(self, reservation_number: str) -> Optional[Reservation]:
        reservation_number = (reservation_number or "").strip()
        if not reservation_number:
            return None
        return self._consultations.get_reservation(reservation_number)
