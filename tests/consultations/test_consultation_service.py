from __future__ import annotations

from typing import Optional

import pytest

from academy_console.consultations.model import BlockedSlot, ConsultationSettings
from academy_console.consultations.service import ConsultationService, ConsultationSettingsService
from academy_console.core.exceptions import ValidationError


class InMemoryConsultations:
    def __init__(self):
        self.rows: dict[int, dict] = {}
        self.list_params: list[dict] = []
        self.conducted: list[tuple[int, dict]] = []
        self.links: list[tuple[int, dict]] = []
        self.settings: Optional[ConsultationSettings] = None
        self.settings_updates: list[dict] = []
        self.weekly_hours: Optional[dict] = None
        self.blocked: dict[int, dict] = {}
        self.taken_slugs = {"taken"}

    def list(self, params=None):
        self.list_params.append(params or {})
        return list(self.rows.values())

    def get(self, consultation_id):
        return None

    def create(self, data):
        new_id = len(self.rows) + 1
        self.rows[new_id] = dict(data, id=new_id)
        return new_id

    def update(self, consultation_id, data):
        self.rows[consultation_id].update(data)

    def delete(self, consultation_id):
        self.rows.pop(consultation_id, None)

    def conduct(self, consultation_id, data):
        self.conducted.append((consultation_id, data))

    def convert(self, consultation_id):
        return 100 + consultation_id

    def link_student(self, consultation_id, data):
        self.links.append((consultation_id, data))

    def calendar(self, params=None):
        return []

    def enrolled(self, params=None):
        return []

    def get_settings(self):
        return self.settings

    def update_settings(self, data):
        self.settings_updates.append(data)

    def update_weekly_hours(self, weekly_hours):
        self.weekly_hours = weekly_hours

    def add_blocked_slot(self, data):
        slot_id = len(self.blocked) + 1
        self.blocked[slot_id] = data
        return BlockedSlot(slot_id=slot_id, date=data["date"], reason=data.get("reason"))

    def remove_blocked_slot(self, slot_id):
        self.blocked.pop(slot_id)

    def check_slug(self, slug):
        return slug not in self.taken_slugs


@pytest.fixture
def repo():
    return InMemoryConsultations()


def test_list_treats_all_as_no_filter(repo):
    ConsultationService(repo).list(status="all", search="  ")

    assert repo.list_params[-1] == {"status": None, "search": None}


def test_list_rejects_unknown_status(repo):
    with pytest.raises(ValidationError):
        ConsultationService(repo).list(status="archived")


def test_create_inquiry_requires_name_and_phone(repo):
    service = ConsultationService(repo)

    with pytest.raises(ValidationError):
        service.create_inquiry({"name": "김학생"})

    new_id = service.create_inquiry({"name": "김학생", "phone": "010-0000-0000", "memo": ""})
    assert repo.rows[new_id] == {"id": new_id, "name": "김학생", "phone": "010-0000-0000"}


def test_update_validates_status(repo):
    service = ConsultationService(repo)
    new_id = service.create_inquiry({"name": "김학생", "phone": "010"})

    with pytest.raises(ValidationError):
        service.update(new_id, {"name": "김학생", "phone": "010", "status": "done"})

    service.update(new_id, {"name": "김학생", "phone": "010", "status": "completed"})
    assert repo.rows[new_id]["status"] == "completed"


def test_conduct_checks_result_and_follow_up_date(repo):
    service = ConsultationService(repo)

    with pytest.raises(ValidationError):
        service.conduct(3, notes="", result="maybe")
    with pytest.raises(ValidationError):
        service.conduct(3, notes="", result="trial", follow_up_date="next week")

    service.conduct(3, notes=" 체험 희망 ", result="trial", follow_up_date="2026-10-25")
    assert repo.conducted == [(3, {"notes": "체험 희망", "result": "trial", "follow_up_date": "2026-10-25"})]


def test_link_student_requires_a_student(repo):
    service = ConsultationService(repo)

    with pytest.raises(ValidationError):
        service.link_student(3, "")

    service.link_student(3, "12")
    assert repo.links == [(3, {"student_id": 12})]


def test_settings_default_when_api_has_none(repo):
    settings = ConsultationSettingsService(repo).get()

    assert settings.duration_minutes == 30
    assert settings.weekly_hours == {}


def test_update_settings_normalizes_slug(repo):
    ConsultationSettingsService(repo).update(
        slug="MaxFit-Gym",
        is_active=True,
        duration_minutes="40",
        max_per_slot=2,
        fields={"school": False},
        notify_on_new=False,
    )

    saved = repo.settings_updates[-1]
    assert saved["slug"] == "maxfit-gym"
    assert saved["duration_minutes"] == 40
    assert saved["fields"] == {"school": False}


@pytest.mark.parametrize("slug", ["", "a", "한글주소", "ends-with-"])
def test_update_settings_rejects_bad_slug(repo, slug):
    with pytest.raises(ValidationError):
        ConsultationSettingsService(repo).update(
            slug=slug, is_active=True, duration_minutes=30, max_per_slot=1, fields={}, notify_on_new=True
        )


def test_update_settings_rejects_zero_duration(repo):
    with pytest.raises(ValidationError):
        ConsultationSettingsService(repo).update(
            slug="maxfit", is_active=True, duration_minutes=0, max_per_slot=1, fields={}, notify_on_new=True
        )


def test_slug_check(repo):
    service = ConsultationSettingsService(repo)

    assert service.is_slug_available("Taken") is False
    assert service.is_slug_available("free-slug") is True


def test_weekly_hours_drop_empty_days(repo):
    saved = ConsultationSettingsService(repo).update_weekly_hours(
        {"mon": ["09:00-12:00", " ", "13:00-18:00"], "tue": [""], "sat": ["10:00-12:00"]}
    )

    assert saved == {"mon": ["09:00-12:00", "13:00-18:00"], "sat": ["10:00-12:00"]}
    assert repo.weekly_hours == saved


def test_weekly_hours_reject_bad_format(repo):
    service = ConsultationSettingsService(repo)

    with pytest.raises(ValidationError):
        service.update_weekly_hours({"mon": ["9-12"]})
    with pytest.raises(ValidationError):
        service.update_weekly_hours({"monday": ["09:00-12:00"]})
    assert repo.weekly_hours is None


def test_blocked_slot_needs_valid_date(repo):
    service = ConsultationSettingsService(repo)

    with pytest.raises(ValidationError):
        service.add_blocked_slot(date="")
    with pytest.raises(ValidationError):
        service.add_blocked_slot(date="10/20")

    slot = service.add_blocked_slot(date="2026-10-20", reason="추석")
    assert slot.slot_id == 1
    assert repo.blocked[1]["reason"] == "추석"

    service.remove_blocked_slot(slot.slot_id)
    assert repo.blocked == {}


def test_preview_blocks_the_whole_day(repo):
    settings = ConsultationSettings(
        weekly_hours={"mon": ["09:00-10:00"]},
        blocked_slots=(BlockedSlot(slot_id=1, date="2026-10-19", start_time="09:00", end_time="09:30"),),
    )

    preview = ConsultationSettingsService(repo).preview(settings)

    assert preview.generate_slots("2026-10-19") == []
    assert preview.generate_slots("2026-10-26") == ["09:00", "09:30"]
