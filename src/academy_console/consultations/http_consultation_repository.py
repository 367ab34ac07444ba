from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..api.http_base import HttpRepository, as_int, as_str, unwrap_item, unwrap_list
from ..core.constants import DEFAULT_CONSULTATION_MINUTES
from ..core.enums import ConsultationStatus
from ..core.exceptions import NotFoundError
from .model import BlockedSlot, Consultation, ConsultationSettings, PublicBookingForm, Reservation
from .repository import ConsultationRepository, PublicConsultationRepository


def _status(value: Any) -> ConsultationStatus:
    try:
        return ConsultationStatus(value)
    except ValueError:
        return ConsultationStatus.PENDING


def _blocked_slot(r: dict) -> BlockedSlot:
    return BlockedSlot(
        slot_id=as_int(r.get("id")),
        date=str(r.get("date") or "")[:10],
        start_time=as_str(r.get("start_time")),
        end_time=as_str(r.get("end_time")),
        reason=r.get("reason") or None,
    )


def _weekly_hours(value: Any) -> dict:
    if not isinstance(value, dict):
        return {}
    return {str(k): [str(v) for v in (ranges or [])] for k, ranges in value.items() if isinstance(ranges, list)}


class HttpConsultationRepository(HttpRepository, ConsultationRepository):
    base_path = "/consultations"

    def get(self, consultation_id: int) -> Optional[Consultation]:
        r = self.get_raw(consultation_id)
        if not r:
            return None
        return Consultation(
            consultation_id=as_int(r.get("id")),
            name=r.get("name") or "",
            phone=r.get("phone") or "",
            status=_status(r.get("status")),
            school=r.get("school"),
            grade=r.get("grade"),
            sport_interest=r.get("sport_interest"),
            memo=r.get("memo"),
            notes=r.get("notes"),
            preferred_date=as_str(r.get("preferred_date")),
            preferred_time=as_str(r.get("preferred_time")),
            reservation_number=as_str(r.get("reservation_number")),
            student_id=as_int(r["student_id"]) if r.get("student_id") else None,
            created_at=as_str(r.get("created_at")),
        )

    def conduct(self, consultation_id: int, data: dict) -> None:
        self._client.post(self._path(int(consultation_id), "conduct"), data)

    def convert(self, consultation_id: int) -> Optional[int]:
        item = unwrap_item(self._client.post(self._path(int(consultation_id), "convert")))
        if not item:
            return None
        student_id = item.get("student_id") or item.get("id")
        return as_int(student_id) if student_id else None

    def link_student(self, consultation_id: int, data: dict) -> None:
        self._client.post(self._path(int(consultation_id), "link-student"), data)

    def calendar(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("calendar"), params=params))

    def enrolled(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("enrolled"), params=params))

    def get_settings(self) -> Optional[ConsultationSettings]:
        r = unwrap_item(self._client.get(self._path("settings")))
        if not r:
            return None
        defaults = ConsultationSettings()
        return ConsultationSettings(
            slug=r.get("slug") or "",
            is_active=bool(r.get("is_active", True)),
            duration_minutes=as_int(r.get("duration_minutes"), DEFAULT_CONSULTATION_MINUTES),
            max_per_slot=as_int(r.get("max_per_slot"), 1),
            fields=r.get("fields") if isinstance(r.get("fields"), dict) else defaults.fields,
            notify_on_new=bool(r.get("notify_on_new", True)),
            notify_email=r.get("notify_email") or "",
            weekly_hours=_weekly_hours(r.get("weekly_hours")),
            blocked_slots=tuple(_blocked_slot(b) for b in r.get("blocked_slots") or [] if isinstance(b, dict)),
        )

    def update_settings(self, data: dict) -> None:
        self._client.put(self._path("settings"), data)

    def update_weekly_hours(self, weekly_hours: dict) -> None:
        self._client.put(self._path("settings", "weekly-hours"), {"weekly_hours": weekly_hours})

    def add_blocked_slot(self, data: dict) -> Optional[BlockedSlot]:
        r = unwrap_item(self._client.post(self._path("settings", "blocked-slots"), data))
        return _blocked_slot(r) if r else None

    def remove_blocked_slot(self, slot_id: int) -> None:
        self._client.delete(self._path("settings", "blocked-slots", int(slot_id)))

    def check_slug(self, slug: str) -> bool:
        r = unwrap_item(self._client.get(self._path("check-slug", slug)))
        return bool(r and r.get("available"))


class HttpPublicConsultationRepository(PublicConsultationRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get_public_form(self, slug: str) -> Optional[PublicBookingForm]:
        try:
            r = unwrap_item(self._client.get(f"/consultations/public/{slug}"))
        except NotFoundError:
            return None
        if not r:
            return None
        return PublicBookingForm(
            slug=slug,
            academy_name=r.get("academy_name") or "학원",
            description=r.get("description"),
            duration_minutes=as_int(r.get("duration_minutes"), DEFAULT_CONSULTATION_MINUTES) or DEFAULT_CONSULTATION_MINUTES,
            fields=r.get("fields") if isinstance(r.get("fields"), dict) else {},
            weekly_hours=_weekly_hours(r.get("weekly_hours")),
            blocked_slots=tuple(b for b in r.get("blocked_slots") or [] if isinstance(b, dict)),
        )

    def submit_public(self, slug: str, data: dict) -> Optional[str]:
        r = unwrap_item(self._client.post(f"/consultations/public/{slug}", data))
        if not r:
            return None
        return as_str(r.get("reservation_number"))

    def get_reservation(self, reservation_number: str) -> Optional[Reservation]:
        try:
            r = unwrap_item(self._client.get(f"/consultations/reservation/{reservation_number}"))
        except NotFoundError:
            return None
        if not r:
            return None
        return Reservation(
            reservation_number=as_str(r.get("reservation_number")) or reservation_number,
            name=r.get("name") or "",
            status=_status(r.get("status")),
            academy_name=r.get("academy_name"),
            preferred_date=as_str(r.get("preferred_date")),
            preferred_time=as_str(r.get("preferred_time")),
            created_at=as_str(r.get("created_at")),
        )
