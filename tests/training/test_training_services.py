from __future__ import annotations

from typing import Optional

import pytest

from academy_console.core.enums import RecordDirection
from academy_console.core.exceptions import ApiError, ValidationError
from academy_console.training.model import RecordType
from academy_console.training.service import (
    DailyTrainingService,
    MonthlyTestService,
    TrainingCatalogService,
    TrainingRecordService,
    TrainingSettingsService,
    parse_ids,
)


class InMemoryCollection:
    def __init__(self):
        self.items: dict[int, dict] = {}
        self.updates: list[tuple[int, dict]] = []

    def list(self, params=None):
        return list(self.items.values())

    def get_raw(self, item_id: int) -> Optional[dict]:
        return self.items.get(item_id)

    def create(self, data: dict) -> Optional[int]:
        new_id = len(self.items) + 1
        self.items[new_id] = dict(data, id=new_id)
        return new_id

    def update(self, item_id: int, data: dict) -> None:
        self.updates.append((item_id, data))

    def delete(self, item_id: int) -> None:
        self.items.pop(item_id, None)


class InMemoryRecordTypes(InMemoryCollection):
    def __init__(self, types=(), error: Optional[Exception] = None):
        super().__init__()
        self.types = list(types)
        self.error = error

    def list_types(self):
        if self.error:
            raise self.error
        return self.types


class InMemoryPacks(InMemoryCollection):
    def __init__(self):
        super().__init__()
        self.applied: list[tuple[int, dict]] = []

    def apply(self, pack_id: int, data: dict) -> None:
        self.applied.append((pack_id, data))


class InMemoryRecords(InMemoryCollection):
    def __init__(self):
        super().__init__()
        self.batches: list[list[dict]] = []

    def by_date(self, params=None):
        return []

    def stats(self, params=None):
        return None

    def batch_create(self, records):
        self.batches.append(list(records))


class InMemoryAssignments(InMemoryCollection):
    def __init__(self):
        super().__init__()
        self.bulk_created: list[dict] = []
        self.bulk_updated: list[dict] = []
        self.synced: list[dict] = []

    def bulk_create(self, data):
        self.bulk_created.append(data)

    def bulk_update(self, data):
        self.bulk_updated.append(data)

    def sync(self, data):
        self.synced.append(data)

    def sync_students(self, data):
        self.synced.append(data)

    def reset(self, data):
        pass

    def instructors(self, params=None):
        return []

    def assign_instructor(self, data):
        pass


class InMemoryStats:
    def __init__(self):
        self.settings: dict = {}

    def averages(self, params=None):
        return []

    def leaderboard(self, params=None):
        return [
            {"rank": 1, "student_name": "박선수", "best_value": 285},
            {"rank": 2, "student_name": "김선수", "best_value": 270},
        ]

    def get_settings(self):
        return self.settings or None

    def update_settings(self, data):
        self.settings = data


class InMemoryTests(InMemoryCollection):
    def __init__(self):
        super().__init__()
        self.saved_records: list[tuple[int, dict]] = []
        self.participants_added: list[tuple[int, dict]] = []

    def rankings(self, test_id):
        return [{"rank": 1, "student_name": "박선수", "total_score": 95, "records": {"1": 285, 2: 7.1}}]

    def add_participants(self, test_id, data):
        self.participants_added.append((test_id, data))

    def save_session_records(self, session_id, data):
        self.saved_records.append((session_id, data))


JUMP = RecordType(record_type_id=1, name="제자리멀리뛰기", unit="cm")
SHUTTLE = RecordType(record_type_id=2, name="20m 왕복달리기", unit="초", direction=RecordDirection.LOWER)
RETIRED = RecordType(record_type_id=3, name="윗몸일으키기", is_active=False)


def _catalog(record_types=None, packs=None, tags=None):
    return TrainingCatalogService(
        record_types=record_types or InMemoryRecordTypes([JUMP, SHUTTLE, RETIRED]),
        score_tables=InMemoryCollection(),
        exercises=InMemoryCollection(),
        tags=tags or InMemoryCollection(),
        packs=packs or InMemoryPacks(),
        presets=InMemoryCollection(),
    )


def test_parse_ids_keeps_first_seen_order_and_drops_blanks():
    assert parse_ids(["3", "", "7", "3", "0", None, 5]) == [3, 7, 5]


def test_parse_ids_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_ids(["3", "three"])


def test_lower_is_better_direction():
    assert SHUTTLE.is_better(7.0, 7.5)
    assert JUMP.is_better(290, 285)


def test_active_record_types():
    catalog = _catalog()

    assert [t.name for t in catalog.record_types(active_only=True)] == ["제자리멀리뛰기", "20m 왕복달리기"]
    assert catalog.record_type(3) == RETIRED
    assert catalog.record_type(99) is None


def test_record_type_payload():
    types = InMemoryRecordTypes()
    catalog = _catalog(record_types=types)

    with pytest.raises(ValidationError):
        catalog.create_record_type({"name": "메디신볼", "direction": "sideways"})

    new_id = catalog.create_record_type({"name": "메디신볼", "unit": "m", "sort_order": "3"})
    assert types.items[new_id] == {"id": new_id, "name": "메디신볼", "unit": "m", "direction": "higher", "sort_order": 3, "is_active": False}


def test_score_ranges_skip_blank_rows():
    ranges = TrainingCatalogService.normalize_ranges(
        [
            {"min_value": "280", "max_value": "300", "score": "100", "grade": "A"},
            {"min_value": "", "max_value": "", "score": ""},
            {"min_value": "260", "max_value": "279.9", "score": "90", "grade": ""},
        ]
    )

    assert ranges == [
        {"min_value": 280.0, "max_value": 300.0, "score": 100.0, "grade": "A"},
        {"min_value": 260.0, "max_value": 279.9, "score": 90.0},
    ]


@pytest.mark.parametrize(
    "row",
    [
        {"min_value": "280", "max_value": "", "score": "100"},
        {"min_value": "300", "max_value": "280", "score": "100"},
        {"min_value": "a", "max_value": "b", "score": "c"},
    ],
)
def test_score_range_errors(row):
    with pytest.raises(ValidationError):
        TrainingCatalogService.normalize_ranges([row])


def test_score_table_needs_record_type():
    with pytest.raises(ValidationError):
        _catalog().create_score_table({"name": "남자 기준표"}, [])


def test_tag_color_format():
    tags = InMemoryCollection()
    catalog = _catalog(tags=tags)

    with pytest.raises(ValidationError):
        catalog.create_tag(name="하체", color="red")

    new_id = catalog.create_tag(name="하체", color="#FF8800")
    assert tags.items[new_id]["color"] == "#FF8800"


def test_apply_pack_needs_a_target():
    packs = InMemoryPacks()
    catalog = _catalog(packs=packs)

    with pytest.raises(ValidationError):
        catalog.apply_pack(1, date="2026-10-19")

    catalog.apply_pack(1, date="2026-10-19", student_ids=["4", "5"])
    assert packs.applied == [(1, {"date": "2026-10-19", "student_ids": [4, 5]})]


def test_assign_returns_number_of_students():
    assignments = InMemoryAssignments()
    daily = DailyTrainingService(plans=InMemoryCollection(), assignments=assignments, logs=InMemoryCollection())

    assert daily.assign(date="2026-10-19", time_slot="evening", student_ids=["1", "2", "2"]) == 2
    assert assignments.bulk_created == [{"date": "2026-10-19", "time_slot": "evening", "student_ids": [1, 2]}]


def test_assign_validation():
    daily = DailyTrainingService(plans=InMemoryCollection(), assignments=InMemoryAssignments(), logs=InMemoryCollection())

    with pytest.raises(ValidationError):
        daily.assign(date="2026-10-19", time_slot="evening", student_ids=[])
    with pytest.raises(ValidationError):
        daily.assign(date="2026-10-19", time_slot="night", student_ids=["1"])
    with pytest.raises(ValidationError):
        daily.assign(date="19-10-2026", time_slot="evening", student_ids=["1"])


def test_move_to_no_class_unassigns():
    assignments = InMemoryAssignments()
    daily = DailyTrainingService(plans=InMemoryCollection(), assignments=assignments, logs=InMemoryCollection())

    daily.move(date="2026-10-19", time_slot="morning", student_ids=["9"], class_id="")

    assert assignments.bulk_updated == [{"date": "2026-10-19", "time_slot": "morning", "class_id": None, "student_ids": [9]}]


def test_save_batch_skips_blank_cells():
    records = InMemoryRecords()
    service = TrainingRecordService(records=records, stats=InMemoryStats())

    saved = service.save_batch(measured_at="2026-10-19", record_type_id="1", values={4: "285", 5: " ", 6: "270.5"})

    assert saved == 2
    assert records.batches == [
        [
            {"student_id": 4, "record_type_id": 1, "value": 285.0, "measured_at": "2026-10-19"},
            {"student_id": 6, "record_type_id": 1, "value": 270.5, "measured_at": "2026-10-19"},
        ]
    ]


def test_save_batch_errors():
    service = TrainingRecordService(records=InMemoryRecords(), stats=InMemoryStats())

    with pytest.raises(ValidationError):
        service.save_batch(measured_at="2026-10-19", record_type_id="1", values={4: ""})
    with pytest.raises(ValidationError):
        service.save_batch(measured_at="2026-10-19", record_type_id="1", values={4: "fast"})
    with pytest.raises(ValidationError):
        service.save_batch(measured_at="2026-10-19", record_type_id="", values={4: "1"})


def test_create_record_requires_value():
    service = TrainingRecordService(records=InMemoryRecords(), stats=InMemoryStats())

    with pytest.raises(ValidationError):
        service.create({"student_id": "4", "record_type_id": "1", "measured_at": "2026-10-19", "value": ""})


def test_monthly_test_payload():
    tests = InMemoryTests()
    service = MonthlyTestService(tests=tests, record_types=InMemoryRecordTypes([JUMP]))

    with pytest.raises(ValidationError):
        service.create({"name": "10월 테스트", "year_month": "2026-13"})

    new_id = service.create({"name": "10월 테스트", "year_month": "2026-10"}, record_type_ids=["1", "2"])
    assert tests.items[new_id]["status"] == "draft"
    assert tests.items[new_id]["record_type_ids"] == [1, 2]


def test_session_records_and_participants():
    tests = InMemoryTests()
    service = MonthlyTestService(tests=tests, record_types=InMemoryRecordTypes([JUMP]))

    assert service.add_participants(1, ["4", "5"]) == 2
    assert service.save_session_records(8, record_type_id=1, values={4: "285", 5: ""}) == 1
    assert tests.saved_records == [(8, {"records": [{"student_id": 4, "record_type_id": 1, "value": 285.0}]})]

    with pytest.raises(ValidationError):
        service.add_participants(1, [])


def test_rankings_workbook_survives_missing_record_types():
    service = MonthlyTestService(tests=InMemoryTests(), record_types=InMemoryRecordTypes(error=ApiError("down")))

    workbook = service.rankings_workbook(1)

    assert workbook.getvalue()[:2] == b"PK"


def test_training_settings_validation():
    stats = InMemoryStats()
    service = TrainingSettingsService(stats)

    with pytest.raises(ValidationError):
        service.update({}, default_time_slots=["midnight"])
    with pytest.raises(ValidationError):
        service.update({"record_display_count": "0"})
    with pytest.raises(ValidationError):
        service.update({"scoreboard_slug": "Max Fit"})

    service.update({"record_display_count": "5", "scoreboard_enabled": "on", "scoreboard_slug": "maxfit"}, default_time_slots=["evening"])
    assert stats.settings == {
        "default_time_slots": ["evening"],
        "record_display_count": 5,
        "allow_self_record": False,
        "scoreboard_enabled": True,
        "scoreboard_slug": "maxfit",
    }
    assert service.get() == stats.settings
