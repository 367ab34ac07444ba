from __future__ import annotations

import pytest

from academy_console.core.exceptions import ValidationError
from academy_console.seasons.service import SeasonService
from academy_console.students.service import StudentService


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[int, dict] = {}
        self.list_params: list[dict] = []

    def list(self, params=None):
        self.list_params.append(params)
        return list(self.rows.values())

    def get(self, student_id):
        return None

    def create(self, data):
        new_id = len(self.rows) + 1
        self.rows[new_id] = data
        return new_id

    def update(self, student_id, data):
        self.rows[student_id] = data

    def delete(self, student_id):
        self.rows.pop(student_id, None)

    def class_days(self, params=None):
        return []


class InMemorySeasons:
    def __init__(self):
        self.created: list[dict] = []
        self.enrolled: list[tuple[int, list[int]]] = []

    def list(self):
        return []

    def get(self, season_id):
        return None

    def create(self, data):
        self.created.append(data)
        return len(self.created)

    def update(self, season_id, data):
        pass

    def delete(self, season_id):
        pass

    def enroll(self, season_id, *, student_ids):
        self.enrolled.append((season_id, student_ids))


def test_new_students_start_active():
    repo = InMemoryStudents()

    new_id = StudentService(repo).create({"name": " 김학생 ", "phone": "010-1111-2222", "time_slot": "evening", "memo": ""})

    assert repo.rows[new_id] == {"name": "김학생", "phone": "010-1111-2222", "time_slot": "evening", "status": "active"}


def test_student_form_validation():
    service = StudentService(InMemoryStudents())

    with pytest.raises(ValidationError):
        service.create({"name": ""})
    with pytest.raises(ValidationError):
        service.create({"name": "김학생", "time_slot": "dawn"})


def test_update_requires_known_status():
    repo = InMemoryStudents()
    service = StudentService(repo)
    new_id = service.create({"name": "김학생"})

    with pytest.raises(ValidationError):
        service.update(new_id, {"name": "김학생", "status": "expelled"})

    service.update(new_id, {"name": "김학생", "status": "paused"})
    assert repo.rows[new_id]["status"] == "paused"


def test_list_filters():
    repo = InMemoryStudents()
    service = StudentService(repo)

    service.list(search="  ", status="", time_slot="morning", page=0)

    assert repo.list_params[-1] == {"search": None, "status": None, "time_slot": "morning", "page": 1, "limit": 50}
    with pytest.raises(ValidationError):
        service.list(status="lost")


def test_season_dates_must_be_ordered():
    repo = InMemorySeasons()
    service = SeasonService(repo)

    with pytest.raises(ValidationError):
        service.create({"name": "2027 수시", "start_date": "2026-12-01", "end_date": "2026-11-01"})
    with pytest.raises(ValidationError):
        service.create({"name": "2027 수시", "start_date": "2026-12-01", "end_date": ""})

    service.create({"name": "2027 수시", "start_date": "2026-07-01", "end_date": "2026-09-30"})
    assert repo.created == [{"name": "2027 수시", "start_date": "2026-07-01", "end_date": "2026-09-30"}]


def test_season_enroll_dedupes_students():
    repo = InMemorySeasons()

    assert SeasonService(repo).enroll(2, ["5", "3", "5", ""]) == 2
    assert repo.enrolled == [(2, [3, 5])]

    with pytest.raises(ValidationError):
        SeasonService(repo).enroll(2, [])
