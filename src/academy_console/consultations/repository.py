from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import BlockedSlot, Consultation, ConsultationSettings, PublicBookingForm, Reservation


class ConsultationRepository(Protocol):
    """Consultation endpoints used by the signed-in console."""

    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, consultation_id: int) -> Optional[Consultation]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, consultation_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, consultation_id: int) -> None:
        raise NotImplementedError

    def conduct(self, consultation_id: int, data: dict) -> None:
        raise NotImplementedError

    def convert(self, consultation_id: int) -> Optional[int]:
        """Turn the inquiry into a student record; returns the student id."""

        raise NotImplementedError

    def link_student(self, consultation_id: int, data: dict) -> None:
        raise NotImplementedError

    def calendar(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def enrolled(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get_settings(self) -> Optional[ConsultationSettings]:
        raise NotImplementedError

    def update_settings(self, data: dict) -> None:
        raise NotImplementedError

    def update_weekly_hours(self, weekly_hours: dict) -> None:
        raise NotImplementedError

    def add_blocked_slot(self, data: dict) -> Optional[BlockedSlot]:
        raise NotImplementedError

    def remove_blocked_slot(self, slot_id: int) -> None:
        raise NotImplementedError

    def check_slug(self, slug: str) -> bool:
        """True when the slug is free to use."""

        raise NotImplementedError


class PublicConsultationRepository(Protocol):
    """Unauthenticated endpoints behind the public booking pages."""

    def get_public_form(self, slug: str) -> Optional[PublicBookingForm]:
        raise NotImplementedError

    def submit_public(self, slug: str, data: dict) -> Optional[str]:
        """Create a booking; returns the reservation number when the API sends one."""

        raise NotImplementedError

    def get_reservation(self, reservation_number: str) -> Optional[Reservation]:
        raise NotImplementedError
