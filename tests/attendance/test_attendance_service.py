from __future__ import annotations

from datetime import date

import pytest

from academy_console.attendance.service import AttendanceService
from academy_console.core.exceptions import ValidationError
from academy_console.schedules.service import ScheduleService
from academy_console.sms.service import SmsService, normalize_phone


class InMemoryAttendance:
    def __init__(self):
        self.marked: list[dict] = []
        self.daily_params: list[dict] = []
        self.monthly_calls: list[tuple[int, int]] = []

    def list(self, params=None):
        return []

    def by_student(self, student_id, params=None):
        return []

    def daily(self, params=None):
        self.daily_params.append(params)
        return []

    def summary(self, params=None):
        return None

    def mark(self, data):
        self.marked.append(data)

    def monthly(self, *, year, month):
        self.monthly_calls.append((year, month))
        return []

    def monthly_summary(self, *, year, month):
        return None


class InMemorySchedules:
    def __init__(self):
        self.created: list[dict] = []
        self.marked: list[tuple[int, dict]] = []

    def create(self, data):
        self.created.append(data)
        return len(self.created)

    def mark_attendance(self, schedule_id, data):
        self.marked.append((schedule_id, data))


class InMemorySms:
    def __init__(self):
        self.sent: list[dict] = []
        self.bulk: list[dict] = []

    def send(self, data):
        self.sent.append(data)

    def send_bulk(self, data):
        self.bulk.append(data)
        return {"sent": 12}


def test_mark_batch_sends_all_records():
    repo = InMemoryAttendance()

    count = AttendanceService(repo).mark_batch(date="2026-10-19", statuses={4: "present", 5: "late"}, time_slot="evening")

    assert count == 2
    assert repo.marked == [
        {
            "date": "2026-10-19",
            "time_slot": "evening",
            "records": [{"student_id": 4, "status": "present"}, {"student_id": 5, "status": "late"}],
        }
    ]


def test_mark_batch_validation():
    service = AttendanceService(InMemoryAttendance())

    with pytest.raises(ValidationError):
        service.mark_batch(date="2026-10-19", statuses={})
    with pytest.raises(ValidationError):
        service.mark_batch(date="2026-10-19", statuses={4: "sleeping"})


def test_daily_defaults_to_today(monkeypatch):
    repo = InMemoryAttendance()
    monkeypatch.setattr("academy_console.attendance.service.today_local", lambda: date(2026, 10, 19))

    AttendanceService(repo).daily()

    assert repo.daily_params == [{"date": "2026-10-19", "time_slot": None}]


def test_monthly_checks_month_range():
    repo = InMemoryAttendance()
    service = AttendanceService(repo)

    with pytest.raises(ValidationError):
        service.monthly(year="2026", month="13")

    service.monthly(year="2026", month="10")
    assert repo.monthly_calls == [(2026, 10)]


def test_schedule_times_must_be_ordered():
    service = ScheduleService(InMemorySchedules())

    with pytest.raises(ValidationError):
        service.create({"name": "저녁반", "time_slot": "evening", "start_time": "21:00", "end_time": "19:00"})
    with pytest.raises(ValidationError):
        service.create({"name": "저녁반", "time_slot": "evening", "capacity": "0"})
    with pytest.raises(ValidationError):
        service.create({"name": "저녁반", "time_slot": "night"})


def test_schedule_attendance_records():
    repo = InMemorySchedules()

    ScheduleService(repo).mark_attendance(3, date="2026-10-19", statuses={4: "present"})

    assert repo.marked == [(3, {"date": "2026-10-19", "records": [{"student_id": 4, "status": "present"}]})]


@pytest.mark.parametrize("raw, expected", [("010-1234-5678", "01012345678"), ("02 123 4567", "021234567")])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_phone_rejects_garbage():
    with pytest.raises(ValidationError):
        normalize_phone("call me")


def test_bulk_sms_length_limit():
    repo = InMemorySms()
    service = SmsService(repo)

    with pytest.raises(ValidationError):
        service.send_bulk({"message": "가" * 91})

    assert service.send_bulk({"message": "가" * 91, "message_type": "lms"}) == {"sent": 12}
    assert repo.bulk[-1]["target"] == "all_students"
