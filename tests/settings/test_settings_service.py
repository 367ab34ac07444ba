from __future__ import annotations

import pytest

from academy_console.core.exceptions import ApiError, ValidationError
from academy_console.settings.model import AcademySettings, WEEKLY_KEYS, parse_json_field
from academy_console.settings.service import SettingsService


class InMemorySettings:
    def __init__(self, *, branches_error=None):
        self.updates: list[dict] = []
        self.events_created: list[dict] = []
        self.invites: list[dict] = []
        self.notification_updates: list[dict] = []
        self.branches_error = branches_error

    def get(self):
        return None

    def update(self, data):
        self.updates.append(data)

    def notifications(self):
        return None

    def update_notifications(self, data):
        self.notification_updates.append(data)

    def events(self):
        return []

    def create_event(self, data):
        self.events_created.append(data)

    def branches(self):
        if self.branches_error:
            raise self.branches_error
        return [{"id": 7, "name": "본점"}]

    def add_branch(self, data):
        pass

    def invite_owner(self, data):
        self.invites.append(data)


@pytest.fixture
def repo():
    return InMemorySettings()


def test_update_parses_formatted_money(repo):
    SettingsService(repo).update(
        {
            "name": "맥스핏",
            "evening_start": "18:00",
            "evening_end": "22:00",
            "payment_due_day": "5",
            "tuition_exam_weekly_3": "450,000",
            "season_fee_exam_early": "₩1,200,000",
            "salary_month_type": "current",
            "salary_payment_day": "25",
        },
        modules=["training", ""],
    )

    saved = repo.updates[-1]
    assert saved["modules"] == ["training"]
    assert saved["evening_start"] == "18:00"
    assert "morning_start" not in saved
    assert saved["payment_due_day"] == 5
    assert saved["tuition_settings"]["exam"]["weekly_3"] == 450000
    assert saved["tuition_settings"]["adult"] == {k: 0 for k in WEEKLY_KEYS}
    assert saved["season_fees"]["exam_early"] == 1200000
    assert saved["salary_settings"] == {"payment_day": 25, "month_type": "current"}


@pytest.mark.parametrize(
    "form, modules",
    [
        ({"name": ""}, []),
        ({"name": "맥스핏"}, ["payroll"]),
        ({"name": "맥스핏", "morning_start": "09:00", "morning_end": "08:00"}, []),
        ({"name": "맥스핏", "morning_start": "9시"}, []),
        ({"name": "맥스핏", "payment_due_day": "32"}, []),
        ({"name": "맥스핏", "salary_month_type": "previous"}, []),
    ],
)
def test_update_validation(repo, form, modules):
    with pytest.raises(ValidationError):
        SettingsService(repo).update(form, modules=modules)
    assert repo.updates == []


def test_onboarding_with_first_season(repo):
    SettingsService(repo).complete_onboarding(
        {"name": "맥스핏", "season_name": "2027 정시", "season_start_date": "2026-11-01", "season_end_date": ""},
        modules=["consultation"],
    )

    saved = repo.updates[-1]
    assert saved["modules"] == ["consultation"]
    assert saved["first_season"] == {"name": "2027 정시", "start_date": "2026-11-01"}


def test_onboarding_without_season(repo):
    SettingsService(repo).complete_onboarding({"name": "맥스핏"})

    assert "first_season" not in repo.updates[-1]


def test_onboarding_rejects_reversed_season(repo):
    with pytest.raises(ValidationError):
        SettingsService(repo).complete_onboarding(
            {"name": "맥스핏", "season_name": "2027 정시", "season_start_date": "2026-11-01", "season_end_date": "2026-10-01"}
        )


def test_event_validation(repo):
    service = SettingsService(repo)

    with pytest.raises(ValidationError):
        service.create_event({"title": "추석", "start_date": "2026-10-05", "end_date": "2026-10-03"})
    with pytest.raises(ValidationError):
        service.create_event({"title": "추석", "start_date": "2026-10-03", "type": "party"})

    service.create_event({"title": "추석", "start_date": "2026-10-03", "end_date": "2026-10-05"})
    assert repo.events_created == [{"title": "추석", "start_date": "2026-10-03", "end_date": "2026-10-05", "type": "holiday"}]


def test_notification_credentials_are_collected(repo):
    SettingsService(repo).update_notifications({"provider": "sens", "sens_access_key": " key ", "other": "x"})

    assert repo.notification_updates == [{"provider": "sens", "sens_access_key": "key"}]


def test_branch_list_failure_is_empty():
    service = SettingsService(InMemorySettings(branches_error=ApiError("forbidden", status_code=403)))

    assert service.branches() == []


def test_invite_owner_checks_email(repo):
    with pytest.raises(ValidationError):
        SettingsService(repo).invite_owner("not-an-email")

    SettingsService(repo).invite_owner("second@academy.test")
    assert repo.invites == [{"email": "second@academy.test"}]


def test_enabled_modules_keep_menu_order():
    settings = AcademySettings(modules=("finance", "training"))

    assert SettingsService.enabled_modules(settings) == ["training", "finance"]
    assert SettingsService.enabled_modules(None) == []


def test_parse_json_field():
    assert parse_json_field('{"a": 1}', {}) == {"a": 1}
    assert parse_json_field("not json", {"b": 2}) == {"b": 2}
    assert parse_json_field(None, {"c": 3}) == {"c": 3}
