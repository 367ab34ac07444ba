from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MonthlyTest, RecordType, TestSession


class TrainingCollection(Protocol):
    """A plain CRUD collection under ``/training`` (exercises, presets ...)."""

    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get_raw(self, item_id: int) -> Optional[dict]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, item_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, item_id: int) -> None:
        raise NotImplementedError


class RecordTypeRepository(TrainingCollection, Protocol):
    def list_types(self) -> Sequence[RecordType]:
        raise NotImplementedError


class ScoreTableRepository(TrainingCollection, Protocol):
    def by_type(self, record_type_id: int) -> Sequence[dict]:
        raise NotImplementedError


class ExercisePackRepository(TrainingCollection, Protocol):
    def apply(self, pack_id: int, data: dict) -> None:
        raise NotImplementedError


class PlanRepository(TrainingCollection, Protocol):
    def update_exercise(self, plan_id: int, data: dict) -> None:
        raise NotImplementedError

    def add_extra(self, plan_id: int, data: dict) -> None:
        raise NotImplementedError


class RecordRepository(TrainingCollection, Protocol):
    def by_date(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def stats(self, params: Optional[dict] = None) -> Optional[dict]:
        raise NotImplementedError

    def batch_create(self, records: Sequence[dict]) -> None:
        raise NotImplementedError


class AssignmentRepository(TrainingCollection, Protocol):
    def bulk_create(self, data: dict) -> None:
        raise NotImplementedError

    def bulk_update(self, data: dict) -> None:
        raise NotImplementedError

    def sync(self, data: dict) -> None:
        raise NotImplementedError

    def sync_students(self, data: dict) -> None:
        raise NotImplementedError

    def reset(self, data: dict) -> None:
        raise NotImplementedError

    def instructors(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def assign_instructor(self, data: dict) -> None:
        raise NotImplementedError


class TrainingLogRepository(TrainingCollection, Protocol):
    def update_condition(self, log_id: int, data: dict) -> None:
        raise NotImplementedError


class MonthlyTestRepository(TrainingCollection, Protocol):
    def get(self, test_id: int) -> Optional[MonthlyTest]:
        raise NotImplementedError

    def rankings(self, test_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def participants(self, test_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def add_participants(self, test_id: int, data: dict) -> None:
        raise NotImplementedError

    def remove_participant(self, test_id: int, participant_id: int) -> None:
        raise NotImplementedError

    def groups(self, test_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def create_group(self, test_id: int, data: dict) -> None:
        raise NotImplementedError

    def update_group(self, test_id: int, group_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete_group(self, test_id: int, group_id: int) -> None:
        raise NotImplementedError

    def sessions(self, test_id: int) -> Sequence[TestSession]:
        raise NotImplementedError

    def create_session(self, test_id: int, data: dict) -> None:
        raise NotImplementedError

    def get_session(self, test_id: int, session_id: int) -> Optional[TestSession]:
        raise NotImplementedError

    def delete_session(self, session_id: int) -> None:
        raise NotImplementedError

    def session_groups(self, session_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def assign_session_groups(self, session_id: int, data: dict) -> None:
        raise NotImplementedError

    def session_participants(self, session_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def sync_session_participants(self, session_id: int, data: dict) -> None:
        raise NotImplementedError

    def session_records(self, session_id: int, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def save_session_records(self, session_id: int, data: dict) -> None:
        raise NotImplementedError

    def update_session_record(self, session_id: int, record_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete_session_record(self, session_id: int, record_id: int) -> None:
        raise NotImplementedError


class TrainingStatsRepository(Protocol):
    def averages(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def leaderboard(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get_settings(self) -> Optional[dict]:
        raise NotImplementedError

    def update_settings(self, data: dict) -> None:
        raise NotImplementedError
