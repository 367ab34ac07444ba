from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..api.http_base import HttpRepository, as_int, as_str, unwrap_item, unwrap_list
from ..core.enums import MonthlyTestStatus, RecordDirection
from .model import MonthlyTest, RecordType, TestSession
from .repository import (
    AssignmentRepository,
    ExercisePackRepository,
    MonthlyTestRepository,
    PlanRepository,
    RecordRepository,
    RecordTypeRepository,
    ScoreTableRepository,
    TrainingCollection,
    TrainingLogRepository,
    TrainingStatsRepository,
)


def _record_type(r: dict) -> RecordType:
    try:
        direction = RecordDirection(r.get("direction"))
    except ValueError:
        direction = RecordDirection.HIGHER
    return RecordType(
        record_type_id=as_int(r.get("id")),
        name=r.get("name") or "",
        unit=r.get("unit") or None,
        direction=direction,
        display_order=as_int(r.get("display_order", r.get("sort_order"))),
        is_active=bool(r.get("is_active", True)),
    )


def _session(r: dict, test_id: Any = None) -> TestSession:
    return TestSession(
        session_id=as_int(r.get("id")),
        test_id=as_int(r.get("test_id", test_id)),
        date=str(r.get("date") or r.get("session_date") or "")[:10],
        start_time=as_str(r.get("start_time")),
        end_time=as_str(r.get("end_time")),
    )


class HttpRecordTypeRepository(HttpRepository, RecordTypeRepository):
    base_path = "/training/record-types"

    def list_types(self) -> Sequence[RecordType]:
        types = [_record_type(r) for r in self.list()]
        return sorted(types, key=lambda t: (t.display_order, t.record_type_id))


class HttpScoreTableRepository(HttpRepository, ScoreTableRepository):
    base_path = "/training/score-tables"

    def by_type(self, record_type_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("by-type", int(record_type_id))))


class HttpExerciseRepository(HttpRepository, TrainingCollection):
    base_path = "/training/exercises"


class HttpExerciseTagRepository(HttpRepository, TrainingCollection):
    base_path = "/training/exercises/tags"


class HttpExercisePackRepository(HttpRepository, ExercisePackRepository):
    base_path = "/training/exercises/packs"

    def apply(self, pack_id: int, data: dict) -> None:
        self._client.post(self._path(int(pack_id), "apply"), data)


class HttpPlanRepository(HttpRepository, PlanRepository):
    base_path = "/training/plans"

    def update_exercise(self, plan_id: int, data: dict) -> None:
        self._client.put(self._path(int(plan_id), "exercise"), data)

    def add_extra(self, plan_id: int, data: dict) -> None:
        self._client.post(self._path(int(plan_id), "extra"), data)


class HttpPresetRepository(HttpRepository, TrainingCollection):
    base_path = "/training/presets"


class HttpRecordRepository(HttpRepository, RecordRepository):
    base_path = "/training/records"

    def by_date(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("by-date"), params=params))

    def stats(self, params: Optional[dict] = None) -> Optional[dict]:
        return unwrap_item(self._client.get(self._path("stats"), params=params))

    def batch_create(self, records: Sequence[dict]) -> None:
        self._client.post(self._path("batch"), {"records": list(records)})


class HttpAssignmentRepository(HttpRepository, AssignmentRepository):
    base_path = "/training/assignments"

    def bulk_create(self, data: dict) -> None:
        self._client.post(self._path("bulk"), data)

    def bulk_update(self, data: dict) -> None:
        self._client.put(self._path("bulk"), data)

    def sync(self, data: dict) -> None:
        self._client.post(self._path("sync"), data)

    def sync_students(self, data: dict) -> None:
        self._client.post(self._path("students", "sync"), data)

    def reset(self, data: dict) -> None:
        self._client.post(self._path("reset"), data)

    def instructors(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("instructors"), params=params))

    def assign_instructor(self, data: dict) -> None:
        self._client.post(self._path("instructors"), data)


class HttpTrainingLogRepository(HttpRepository, TrainingLogRepository):
    base_path = "/training/training-logs"

    def update_condition(self, log_id: int, data: dict) -> None:
        self._client.put(self._path(int(log_id), "condition"), data)


class HttpMonthlyTestRepository(HttpRepository, MonthlyTestRepository):
    base_path = "/training/tests"

    def get(self, test_id: int) -> Optional[MonthlyTest]:
        r = self.get_raw(test_id)
        if not r:
            return None
        try:
            status = MonthlyTestStatus(r.get("status"))
        except ValueError:
            status = MonthlyTestStatus.DRAFT
        return MonthlyTest(
            test_id=as_int(r.get("id")),
            name=r.get("name") or "",
            year_month=str(r.get("year_month") or ""),
            status=status,
            description=r.get("description"),
        )

    def rankings(self, test_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(test_id), "rankings")))

    def participants(self, test_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(test_id), "participants")))

    def add_participants(self, test_id: int, data: dict) -> None:
        self._client.post(self._path(int(test_id), "participants"), data)

    def remove_participant(self, test_id: int, participant_id: int) -> None:
        self._client.delete(self._path(int(test_id), "participants", int(participant_id)))

    def groups(self, test_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path(int(test_id), "groups")))

    def create_group(self, test_id: int, data: dict) -> None:
        self._client.post(self._path(int(test_id), "groups"), data)

    def update_group(self, test_id: int, group_id: int, data: dict) -> None:
        self._client.put(self._path(int(test_id), "groups", int(group_id)), data)

    def delete_group(self, test_id: int, group_id: int) -> None:
        self._client.delete(self._path(int(test_id), "groups", int(group_id)))

    def sessions(self, test_id: int) -> Sequence[TestSession]:
        return [_session(r, test_id) for r in unwrap_list(self._client.get(self._path(int(test_id), "sessions")))]

    def create_session(self, test_id: int, data: dict) -> None:
        self._client.post(self._path(int(test_id), "sessions"), data)

    def get_session(self, test_id: int, session_id: int) -> Optional[TestSession]:
        r = unwrap_item(self._client.get(self._path(int(test_id), "sessions", int(session_id))))
        return _session(r, test_id) if r else None

    # Session-level endpoints are addressed without the test id.
    def delete_session(self, session_id: int) -> None:
        self._client.delete(self._path("sessions", int(session_id)))

    def session_groups(self, session_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("sessions", int(session_id), "groups")))

    def assign_session_groups(self, session_id: int, data: dict) -> None:
        self._client.post(self._path("sessions", int(session_id), "groups"), data)

    def session_participants(self, session_id: int) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("sessions", int(session_id), "participants")))

    def sync_session_participants(self, session_id: int, data: dict) -> None:
        self._client.post(self._path("sessions", int(session_id), "participants", "sync"), data)

    def session_records(self, session_id: int, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("sessions", int(session_id), "records"), params=params))

    def save_session_records(self, session_id: int, data: dict) -> None:
        self._client.post(self._path("sessions", int(session_id), "records"), data)

    def update_session_record(self, session_id: int, record_id: int, data: dict) -> None:
        self._client.put(self._path("sessions", int(session_id), "records", int(record_id)), data)

    def delete_session_record(self, session_id: int, record_id: int) -> None:
        self._client.delete(self._path("sessions", int(session_id), "records", int(record_id)))


class HttpTrainingStatsRepository(TrainingStatsRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def averages(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get("/training/stats/averages", params=params))

    def leaderboard(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get("/training/stats/leaderboard", params=params))

    def get_settings(self) -> Optional[dict]:
        return unwrap_item(self._client.get("/training/settings"))

    def update_settings(self, data: dict) -> None:
        self._client.post("/training/settings", data)
