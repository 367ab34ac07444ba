from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from academy_console.consultations.model import PublicBookingForm, Reservation
from academy_console.consultations.public_service import PublicBookingService
from academy_console.core.enums import ConsultationStatus
from academy_console.core.exceptions import ValidationError

TODAY = date(2026, 10, 18)


class InMemoryPublicConsultations:
    def __init__(self, forms: dict[str, PublicBookingForm]):
        self._forms = forms
        self.submitted: list[tuple[str, dict]] = []
        self.reservations: dict[str, Reservation] = {}

    def get_public_form(self, slug: str) -> Optional[PublicBookingForm]:
        return self._forms.get(slug)

    def submit_public(self, slug: str, data: dict) -> Optional[str]:
        self.submitted.append((slug, data))
        number = f"R-{len(self.submitted):04d}"
        self.reservations[number] = Reservation(
            reservation_number=number,
            name=data["name"],
            status=ConsultationStatus.PENDING,
            preferred_date=data.get("preferred_date"),
            preferred_time=data.get("preferred_time"),
        )
        return number

    def get_reservation(self, reservation_number: str) -> Optional[Reservation]:
        return self.reservations.get(reservation_number)


def _form(**overrides) -> PublicBookingForm:
    values = dict(
        slug="maxfit",
        academy_name="맥스핏 체대입시",
        description=None,
        duration_minutes=30,
        fields={},
        weekly_hours={"mon": ["09:00-10:00"]},
        blocked_slots=({"date": "2026-10-26"},),
    )
    values.update(overrides)
    return PublicBookingForm(**values)


@pytest.fixture
def repo():
    return InMemoryPublicConsultations({"maxfit": _form()})


@pytest.fixture
def service(repo):
    return PublicBookingService(repo)


def test_day_availability_lists_slots(service):
    day = service.day_availability(_form(), "2026-10-19", today=TODAY)

    assert day.available is True
    assert day.slots == ["09:00", "09:30"]


def test_past_dates_are_not_bookable(service):
    day = service.day_availability(_form(), "2026-10-12", today=TODAY)

    assert day.available is False
    assert day.slots == []


def test_blocked_monday_is_not_bookable(service):
    day = service.day_availability(_form(), "2026-10-26", today=TODAY)

    assert day.available is False


def test_day_availability_rejects_garbage(service):
    with pytest.raises(ValidationError):
        service.day_availability(_form(), "tomorrow", today=TODAY)


def test_submit_requires_name_and_phone(service, repo):
    with pytest.raises(ValidationError):
        service.submit(_form(), {"name": "김학생", "phone": " "}, today=TODAY)
    assert repo.submitted == []


def test_submit_rejects_unknown_grade(service):
    with pytest.raises(ValidationError):
        service.submit(_form(), {"name": "김학생", "phone": "010-1234-5678", "grade": "대학생"}, today=TODAY)


def test_submit_rejects_closed_day(service):
    with pytest.raises(ValidationError):
        service.submit(
            _form(),
            {"name": "김학생", "phone": "010-1234-5678", "preferred_date": "2026-10-20", "preferred_time": "09:00"},
            today=TODAY,
        )


def test_submit_rejects_time_outside_slots(service):
    with pytest.raises(ValidationError):
        service.submit(
            _form(),
            {"name": "김학생", "phone": "010-1234-5678", "preferred_date": "2026-10-19", "preferred_time": "11:00"},
            today=TODAY,
        )


def test_submit_sends_compact_payload_and_returns_reservation(service, repo):
    number = service.submit(
        _form(),
        {
            "name": " 김학생 ",
            "phone": "010-1234-5678",
            "grade": "고2",
            "school": "",
            "preferred_date": "2026-10-19",
            "preferred_time": "09:30",
        },
        today=TODAY,
    )

    assert number == "R-0001"
    slug, payload = repo.submitted[0]
    assert slug == "maxfit"
    assert payload == {
        "name": "김학생",
        "phone": "010-1234-5678",
        "grade": "고2",
        "preferred_date": "2026-10-19",
        "preferred_time": "09:30",
    }


def test_hidden_fields_are_not_sent(service, repo):
    form = _form(fields={"school": False, "preferred_date": False})

    service.submit(
        form,
        {"name": "김학생", "phone": "010", "school": "체육고", "preferred_date": "2026-10-20", "preferred_time": "23:00"},
        today=TODAY,
    )

    _, payload = repo.submitted[0]
    assert "school" not in payload
    assert "preferred_date" not in payload
    assert "preferred_time" not in payload


def test_any_time_accepted_when_open_day_has_no_slots(service, repo):
    form = _form(weekly_hours={})

    service.submit(
        form,
        {"name": "김학생", "phone": "010", "preferred_date": "2026-10-20", "preferred_time": "19:00"},
        today=TODAY,
    )

    assert repo.submitted[0][1]["preferred_time"] == "19:00"


def test_lookup_reservation(service):
    number = service.submit(_form(), {"name": "김학생", "phone": "010"}, today=TODAY)

    assert service.lookup_reservation(number).name == "김학생"
    assert service.lookup_reservation("  ") is None
    assert service.lookup_reservation("R-9999") is None
