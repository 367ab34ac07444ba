from __future__ import annotations

import io
import logging
import re
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import current_year_month, parse_iso_date
from ..common.validators import (
    compact,
    optional_int,
    optional_text,
    require_choice,
    require_non_empty,
    require_positive_int,
    require_year_month,
)
from ..core.enums import MonthlyTestStatus, RecordDirection, TimeSlot
from ..core.exceptions import ApiError, ValidationError
from .model import CONDITION_OPTIONS, GENDER_LABELS, MonthlyTest, RecordType, TestSession
from .rankings import leaderboard_workbook, rankings_workbook
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

logger = logging.getLogger(__name__)

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

_TIME_SLOTS = [t.value for t in TimeSlot]


def parse_ids(values: Iterable) -> list[int]:
    """Distinct positive ids from form values, in first-seen order."""
    out: list[int] = []
    for v in values:
        if v is None or str(v).strip() == "":
            continue
        try:
            n = int(v)
        except (TypeError, ValueError):
            raise ValidationError("선택 값이 올바르지 않습니다")
        if n > 0 and n not in out:
            out.append(n)
    return out


def parse_number(value, message: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)


def _date(value: Optional[str], message: str = "날짜를 선택하세요") -> str:
    value = require_non_empty(value, message)
    try:
        return parse_iso_date(value).isoformat()
    except ValueError:
        raise ValidationError("날짜 형식이 올바르지 않습니다")


def _time_slot(value: Optional[str]) -> Optional[str]:
    value = optional_text(value)
    if value:
        require_choice(value, _TIME_SLOTS, "시간대 값이 올바르지 않습니다")
    return value


class TrainingCatalogService:
    """Events, score tables, exercises, tags, packs and presets."""

    def __init__(
        self,
        *,
        record_types: RecordTypeRepository,
        score_tables: ScoreTableRepository,
        exercises: TrainingCollection,
        tags: TrainingCollection,
        packs: ExercisePackRepository,
        presets: TrainingCollection,
    ):
        self._record_types = record_types
        self._score_tables = score_tables
        self._exercises = exercises
        self._tags = tags
        self._packs = packs
        self._presets = presets

    # record types
    def record_types(self, *, active_only: bool = False) -> Sequence[RecordType]:
        types = self._record_types.list_types()
        return [t for t in types if t.is_active] if active_only else list(types)

    def record_type(self, record_type_id: int) -> Optional[RecordType]:
        return next((t for t in self._record_types.list_types() if t.record_type_id == int(record_type_id)), None)

    @staticmethod
    def _record_type_payload(form: Mapping[str, str]) -> dict:
        direction = form.get("direction") or RecordDirection.HIGHER.value
        require_choice(direction, [d.value for d in RecordDirection], "기록 방향을 선택하세요")
        return compact(
            {
                "name": require_non_empty(form.get("name"), "종목명을 입력하세요"),
                "unit": optional_text(form.get("unit")),
                "direction": direction,
                "description": optional_text(form.get("description")),
                "sort_order": optional_int(form.get("sort_order"), "정렬 순서는 숫자로 입력하세요"),
                "is_active": form.get("is_active") in ("on", "true", "1"),
            }
        )

    def create_record_type(self, form: Mapping[str, str]) -> Optional[int]:
        return self._record_types.create(self._record_type_payload(form))

    def update_record_type(self, record_type_id: int, form: Mapping[str, str]) -> None:
        self._record_types.update(int(record_type_id), self._record_type_payload(form))

    def delete_record_type(self, record_type_id: int) -> None:
        self._record_types.delete(int(record_type_id))

    # score tables
    def score_tables(self, *, record_type_id=None) -> Sequence[dict]:
        if record_type_id:
            return self._score_tables.by_type(int(record_type_id))
        return self._score_tables.list()

    @staticmethod
    def normalize_ranges(ranges: Sequence[Mapping]) -> list[dict]:
        """Validate score ranges; fully blank rows are skipped."""
        out = []
        for r in ranges:
            lo = parse_number(r.get("min_value"), "기록 범위는 숫자로 입력하세요")
            hi = parse_number(r.get("max_value"), "기록 범위는 숫자로 입력하세요")
            score = parse_number(r.get("score"), "점수는 숫자로 입력하세요")
            if lo is None and hi is None and score is None:
                continue
            if lo is None or hi is None or score is None:
                raise ValidationError("범위와 점수를 모두 입력하세요")
            if lo > hi:
                raise ValidationError("최솟값은 최댓값보다 클 수 없습니다")
            out.append(compact({"min_value": lo, "max_value": hi, "score": score, "grade": optional_text(r.get("grade"))}))
        return out

    def _score_table_payload(self, form: Mapping[str, str], ranges: Sequence[Mapping]) -> dict:
        gender = optional_text(form.get("gender"))
        if gender:
            require_choice(gender, GENDER_LABELS, "성별 값이 올바르지 않습니다")
        return compact(
            {
                "record_type_id": require_positive_int(form.get("record_type_id"), "종목을 선택하세요"),
                "name": optional_text(form.get("name")),
                "gender": gender,
                "ranges": self.normalize_ranges(ranges),
            }
        )

    def score_table(self, table_id: int) -> Optional[dict]:
        return self._score_tables.get_raw(int(table_id))

    def create_score_table(self, form: Mapping[str, str], ranges: Sequence[Mapping]) -> Optional[int]:
        return self._score_tables.create(self._score_table_payload(form, ranges))

    def update_score_table(self, table_id: int, form: Mapping[str, str], ranges: Sequence[Mapping]) -> None:
        self._score_tables.update(int(table_id), self._score_table_payload(form, ranges))

    def delete_score_table(self, table_id: int) -> None:
        self._score_tables.delete(int(table_id))

    # exercises and tags
    def exercises(self, *, search: Optional[str] = None, tag_id=None) -> Sequence[dict]:
        return self._exercises.list({"search": optional_text(search), "tag_id": tag_id or None})

    @staticmethod
    def _exercise_payload(form: Mapping[str, str], tag_ids: Iterable) -> dict:
        return compact(
            {
                "name": require_non_empty(form.get("name"), "운동명을 입력하세요"),
                "description": optional_text(form.get("description")),
                "category": optional_text(form.get("category")),
                "video_url": optional_text(form.get("video_url")),
                "tag_ids": parse_ids(tag_ids),
            }
        )

    def exercise(self, exercise_id: int) -> Optional[dict]:
        return self._exercises.get_raw(int(exercise_id))

    def create_exercise(self, form: Mapping[str, str], *, tag_ids: Iterable = ()) -> Optional[int]:
        return self._exercises.create(self._exercise_payload(form, tag_ids))

    def update_exercise(self, exercise_id: int, form: Mapping[str, str], *, tag_ids: Iterable = ()) -> None:
        self._exercises.update(int(exercise_id), self._exercise_payload(form, tag_ids))

    def delete_exercise(self, exercise_id: int) -> None:
        self._exercises.delete(int(exercise_id))

    def tags(self) -> Sequence[dict]:
        return self._tags.list()

    @staticmethod
    def _tag_payload(name: str, color: str) -> dict:
        color = optional_text(color)
        if color and not _COLOR_RE.match(color):
            raise ValidationError("색상은 #RRGGBB 형식이어야 합니다")
        return compact({"name": require_non_empty(name, "태그명을 입력하세요"), "color": color})

    def create_tag(self, *, name: str, color: str = "") -> Optional[int]:
        return self._tags.create(self._tag_payload(name, color))

    def update_tag(self, tag_id: int, *, name: str, color: str = "") -> None:
        self._tags.update(int(tag_id), self._tag_payload(name, color))

    def delete_tag(self, tag_id: int) -> None:
        self._tags.delete(int(tag_id))

    # packs
    def packs(self) -> Sequence[dict]:
        return self._packs.list()

    def pack(self, pack_id: int) -> Optional[dict]:
        return self._packs.get_raw(int(pack_id))

    def create_pack(self, *, name: str, description: str = "", exercise_ids: Iterable = ()) -> Optional[int]:
        return self._packs.create(
            compact(
                {
                    "name": require_non_empty(name, "팩 이름을 입력하세요"),
                    "description": optional_text(description),
                    "exercise_ids": parse_ids(exercise_ids),
                }
            )
        )

    def update_pack(self, pack_id: int, *, name: str, description: str = "", exercise_ids: Iterable = ()) -> None:
        self._packs.update(
            int(pack_id),
            compact(
                {
                    "name": require_non_empty(name, "팩 이름을 입력하세요"),
                    "description": optional_text(description),
                    "exercise_ids": parse_ids(exercise_ids),
                }
            ),
        )

    def delete_pack(self, pack_id: int) -> None:
        self._packs.delete(int(pack_id))

    def apply_pack(self, pack_id: int, *, date: str, plan_id=None, class_id=None, student_ids: Iterable = ()) -> None:
        """Copy the pack's exercises onto a plan (or class/students) for a date."""
        students = parse_ids(student_ids)
        if not plan_id and not class_id and not students:
            raise ValidationError("적용할 계획 또는 학생을 선택하세요")
        self._packs.apply(
            int(pack_id),
            compact(
                {
                    "date": _date(date),
                    "plan_id": int(plan_id) if plan_id else None,
                    "class_id": int(class_id) if class_id else None,
                    "student_ids": students or None,
                }
            ),
        )

    # presets
    def presets(self) -> Sequence[dict]:
        return self._presets.list()

    def preset(self, preset_id: int) -> Optional[dict]:
        return self._presets.get_raw(int(preset_id))

    def create_preset(self, *, name: str, description: str = "", exercise_ids: Iterable = ()) -> Optional[int]:
        return self._presets.create(
            compact(
                {
                    "name": require_non_empty(name, "프리셋 이름을 입력하세요"),
                    "description": optional_text(description),
                    "exercises": parse_ids(exercise_ids),
                }
            )
        )

    def update_preset(self, preset_id: int, *, name: str, description: str = "", exercise_ids: Iterable = ()) -> None:
        self._presets.update(
            int(preset_id),
            compact(
                {
                    "name": require_non_empty(name, "프리셋 이름을 입력하세요"),
                    "description": optional_text(description),
                    "exercises": parse_ids(exercise_ids),
                }
            ),
        )

    def delete_preset(self, preset_id: int) -> None:
        self._presets.delete(int(preset_id))


class DailyTrainingService:
    """Daily plans, class assignments and training logs."""

    def __init__(self, *, plans: PlanRepository, assignments: AssignmentRepository, logs: TrainingLogRepository):
        self._plans = plans
        self._assignments = assignments
        self._logs = logs

    # plans
    def plans(self, *, date: Optional[str] = None, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._plans.list({"date": optional_text(date), "time_slot": _time_slot(time_slot)})

    def get_plan(self, plan_id: int) -> Optional[dict]:
        return self._plans.get_raw(int(plan_id))

    @staticmethod
    def _plan_payload(form: Mapping[str, str], exercise_ids: Iterable) -> dict:
        return compact(
            {
                "date": _date(form.get("date")),
                "time_slot": _time_slot(form.get("time_slot")),
                "class_id": optional_int(form.get("class_id"), "반을 다시 선택하세요"),
                "instructor_id": optional_int(form.get("instructor_id"), "강사를 다시 선택하세요"),
                "exercises": parse_ids(exercise_ids),
                "conditions": optional_text(form.get("conditions")),
            }
        )

    def create_plan(self, form: Mapping[str, str], *, exercise_ids: Iterable = ()) -> Optional[int]:
        return self._plans.create(self._plan_payload(form, exercise_ids))

    def update_plan(self, plan_id: int, form: Mapping[str, str], *, exercise_ids: Iterable = ()) -> None:
        self._plans.update(int(plan_id), self._plan_payload(form, exercise_ids))

    def delete_plan(self, plan_id: int) -> None:
        self._plans.delete(int(plan_id))

    def replace_plan_exercise(self, plan_id: int, exercise_id) -> None:
        self._plans.update_exercise(int(plan_id), {"exercise_id": require_positive_int(exercise_id, "운동을 선택하세요")})

    def add_extra_exercise(self, plan_id: int, exercise_id) -> None:
        self._plans.add_extra(int(plan_id), {"exercise_id": require_positive_int(exercise_id, "운동을 선택하세요")})

    # assignments
    def assignments(self, *, date: Optional[str] = None, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._assignments.list({"date": optional_text(date), "time_slot": _time_slot(time_slot)})

    def assign(self, *, date: str, time_slot: str, student_ids: Iterable, class_id=None) -> int:
        students = parse_ids(student_ids)
        if not students:
            raise ValidationError("배정할 학생을 선택하세요")
        self._assignments.bulk_create(
            compact(
                {
                    "date": _date(date),
                    "time_slot": require_choice(time_slot, _TIME_SLOTS, "시간대를 선택하세요"),
                    "class_id": int(class_id) if class_id else None,
                    "student_ids": students,
                }
            )
        )
        return len(students)

    def move(self, *, date: str, time_slot: str, student_ids: Iterable, class_id=None) -> None:
        """Move already assigned students to another class (``None`` unassigns)."""
        students = parse_ids(student_ids)
        if not students:
            raise ValidationError("이동할 학생을 선택하세요")
        self._assignments.bulk_update(
            {
                "date": _date(date),
                "time_slot": require_choice(time_slot, _TIME_SLOTS, "시간대를 선택하세요"),
                "class_id": int(class_id) if class_id else None,
                "student_ids": students,
            }
        )

    def unassign(self, assignment_id: int) -> None:
        self._assignments.delete(int(assignment_id))

    def sync(self, *, date: str, time_slot: Optional[str] = None) -> None:
        """Pull the day's scheduled students into the assignment board."""
        self._assignments.sync(compact({"date": _date(date), "time_slot": _time_slot(time_slot)}))

    def sync_students(self, *, date: str, class_id=None, student_ids: Iterable = ()) -> None:
        self._assignments.sync_students(
            compact(
                {
                    "date": _date(date),
                    "class_id": int(class_id) if class_id else None,
                    "student_ids": parse_ids(student_ids) or None,
                }
            )
        )

    def reset(self, *, date: str, class_id=None) -> None:
        self._assignments.reset(compact({"date": _date(date), "class_id": int(class_id) if class_id else None}))

    def class_instructors(self, *, date: str, time_slot: Optional[str] = None) -> Sequence[dict]:
        return self._assignments.instructors({"date": _date(date), "time_slot": _time_slot(time_slot)})

    def assign_instructor(self, *, instructor_id, date: str, time_slot: str, class_id=None) -> None:
        self._assignments.assign_instructor(
            compact(
                {
                    "instructor_id": require_positive_int(instructor_id, "강사를 선택하세요"),
                    "date": _date(date),
                    "time_slot": require_choice(time_slot, _TIME_SLOTS, "시간대를 선택하세요"),
                    "class_id": int(class_id) if class_id else None,
                }
            )
        )

    # logs
    def logs(self, *, date: Optional[str] = None, student_id=None) -> Sequence[dict]:
        return self._logs.list({"date": optional_text(date), "student_id": student_id or None})

    @staticmethod
    def _log_payload(form: Mapping[str, str]) -> dict:
        content = optional_text(form.get("content"))
        notes = optional_text(form.get("notes"))
        if not content and not notes:
            raise ValidationError("일지 내용을 입력하세요")
        condition = optional_text(form.get("condition"))
        if condition:
            require_choice(condition, CONDITION_OPTIONS, "컨디션 값이 올바르지 않습니다")
        return compact(
            {
                "date": _date(form.get("date")),
                "time_slot": _time_slot(form.get("time_slot")),
                "class_id": optional_int(form.get("class_id"), "반을 다시 선택하세요"),
                "student_id": optional_int(form.get("student_id"), "학생을 다시 선택하세요"),
                "instructor_id": optional_int(form.get("instructor_id"), "강사를 다시 선택하세요"),
                "content": content,
                "notes": notes,
                "condition": condition,
            }
        )

    def get_log(self, log_id: int) -> Optional[dict]:
        return self._logs.get_raw(int(log_id))

    def create_log(self, form: Mapping[str, str]) -> Optional[int]:
        return self._logs.create(self._log_payload(form))

    def update_log(self, log_id: int, form: Mapping[str, str]) -> None:
        self._logs.update(int(log_id), self._log_payload(form))

    def delete_log(self, log_id: int) -> None:
        self._logs.delete(int(log_id))

    def set_condition(self, log_id: int, *, condition: str, student_id=None) -> None:
        require_choice(condition, CONDITION_OPTIONS, "컨디션 값이 올바르지 않습니다")
        self._logs.update_condition(
            int(log_id), compact({"condition": condition, "student_id": int(student_id) if student_id else None})
        )


class TrainingRecordService:
    """Student measurements, statistics and the leaderboard."""

    def __init__(self, *, records: RecordRepository, stats: TrainingStatsRepository):
        self._records = records
        self._stats = stats

    def list(self, *, student_id=None, record_type_id=None, year_month: Optional[str] = None) -> Sequence[dict]:
        return self._records.list(
            {"student_id": student_id or None, "record_type_id": record_type_id or None, "year_month": optional_text(year_month)}
        )

    def by_date(self, date: str) -> Sequence[dict]:
        return self._records.by_date({"date": _date(date)})

    def student_stats(self, *, student_id, record_type_id=None) -> dict:
        return (
            self._records.stats(
                {
                    "student_id": require_positive_int(student_id, "학생을 선택하세요"),
                    "record_type_id": record_type_id or None,
                }
            )
            or {}
        )

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        value = parse_number(form.get("value"), "기록은 숫자로 입력하세요")
        if value is None:
            raise ValidationError("기록을 입력하세요")
        return self._records.create(
            compact(
                {
                    "student_id": require_positive_int(form.get("student_id"), "학생을 선택하세요"),
                    "record_type_id": require_positive_int(form.get("record_type_id"), "종목을 선택하세요"),
                    "value": value,
                    "measured_at": _date(form.get("measured_at"), "측정일을 선택하세요"),
                    "notes": optional_text(form.get("notes")),
                }
            )
        )

    def update(self, record_id: int, *, value, notes: str = "") -> None:
        number = parse_number(value, "기록은 숫자로 입력하세요")
        if number is None:
            raise ValidationError("기록을 입력하세요")
        self._records.update(int(record_id), compact({"value": number, "notes": optional_text(notes)}))

    def delete(self, record_id: int) -> None:
        self._records.delete(int(record_id))

    def save_batch(self, *, measured_at: str, record_type_id, values: Mapping) -> int:
        """Save one event's values for many students; blank cells are skipped.

        ``values`` maps student id to the raw form value.
        """
        day = _date(measured_at, "측정일을 선택하세요")
        type_id = require_positive_int(record_type_id, "종목을 선택하세요")
        records = []
        for student_id, raw in values.items():
            value = parse_number(raw, "기록은 숫자로 입력하세요")
            if value is None:
                continue
            records.append({"student_id": int(student_id), "record_type_id": type_id, "value": value, "measured_at": day})
        if not records:
            raise ValidationError("저장할 기록이 없습니다")
        self._records.batch_create(records)
        return len(records)

    def averages(self, *, year_month: Optional[str] = None) -> Sequence[dict]:
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._stats.averages({"year_month": year_month})

    def leaderboard(self, *, record_type_id=None, limit: int = 10) -> Sequence[dict]:
        return self._stats.leaderboard({"record_type_id": record_type_id or None, "limit": max(1, int(limit))})

    def leaderboard_workbook(self, *, record_type_id=None, limit: int = 100) -> io.BytesIO:
        return leaderboard_workbook(self.leaderboard(record_type_id=record_type_id, limit=limit))


class MonthlyTestService:
    def __init__(self, *, tests: MonthlyTestRepository, record_types: RecordTypeRepository):
        self._tests = tests
        self._record_types = record_types

    def list(self, *, year_month: Optional[str] = None, status: Optional[str] = None) -> Sequence[dict]:
        status = optional_text(status)
        if status:
            require_choice(status, [s.value for s in MonthlyTestStatus], "상태 값이 올바르지 않습니다")
        return self._tests.list({"year_month": optional_text(year_month), "status": status})

    def get(self, test_id: int) -> Optional[MonthlyTest]:
        return self._tests.get(int(test_id))

    @staticmethod
    def _payload(form: Mapping[str, str], record_type_ids: Iterable) -> dict:
        status = form.get("status") or MonthlyTestStatus.DRAFT.value
        require_choice(status, [s.value for s in MonthlyTestStatus], "상태 값이 올바르지 않습니다")
        year_month = require_year_month(form.get("year_month"), "테스트 월 형식이 올바르지 않습니다 (YYYY-MM)")
        return compact(
            {
                "name": require_non_empty(form.get("name"), "테스트명을 입력하세요"),
                "year_month": year_month,
                "description": optional_text(form.get("description")),
                "status": status,
                "record_type_ids": parse_ids(record_type_ids) or None,
            }
        )

    def create(self, form: Mapping[str, str], *, record_type_ids: Iterable = ()) -> Optional[int]:
        return self._tests.create(self._payload(form, record_type_ids))

    def update(self, test_id: int, form: Mapping[str, str], *, record_type_ids: Iterable = ()) -> None:
        self._tests.update(int(test_id), self._payload(form, record_type_ids))

    def delete(self, test_id: int) -> None:
        self._tests.delete(int(test_id))

    # participants and groups
    def participants(self, test_id: int) -> Sequence[dict]:
        return self._tests.participants(int(test_id))

    def add_participants(self, test_id: int, student_ids: Iterable) -> int:
        students = parse_ids(student_ids)
        if not students:
            raise ValidationError("참가 학생을 선택하세요")
        self._tests.add_participants(int(test_id), {"student_ids": students})
        return len(students)

    def remove_participant(self, test_id: int, participant_id: int) -> None:
        self._tests.remove_participant(int(test_id), int(participant_id))

    def groups(self, test_id: int) -> Sequence[dict]:
        return self._tests.groups(int(test_id))

    def create_group(self, test_id: int, *, name: str, student_ids: Iterable = ()) -> None:
        self._tests.create_group(
            int(test_id), {"name": require_non_empty(name, "조 이름을 입력하세요"), "student_ids": parse_ids(student_ids)}
        )

    def update_group(self, test_id: int, group_id: int, *, name: str, student_ids: Iterable = ()) -> None:
        self._tests.update_group(
            int(test_id),
            int(group_id),
            {"name": require_non_empty(name, "조 이름을 입력하세요"), "student_ids": parse_ids(student_ids)},
        )

    def delete_group(self, test_id: int, group_id: int) -> None:
        self._tests.delete_group(int(test_id), int(group_id))

    # sessions
    def sessions(self, test_id: int) -> Sequence[TestSession]:
        return self._tests.sessions(int(test_id))

    def get_session(self, test_id: int, session_id: int) -> Optional[TestSession]:
        return self._tests.get_session(int(test_id), int(session_id))

    def create_session(self, test_id: int, *, date: str, name: str = "", record_type_ids: Iterable = ()) -> None:
        self._tests.create_session(
            int(test_id),
            compact(
                {
                    "name": optional_text(name),
                    "session_date": _date(date),
                    "record_type_ids": parse_ids(record_type_ids) or None,
                }
            ),
        )

    def delete_session(self, session_id: int) -> None:
        self._tests.delete_session(int(session_id))

    def session_groups(self, session_id: int) -> Sequence[dict]:
        return self._tests.session_groups(int(session_id))

    def assign_session_groups(self, session_id: int, group_ids: Iterable) -> None:
        self._tests.assign_session_groups(int(session_id), {"group_ids": parse_ids(group_ids)})

    def session_participants(self, session_id: int) -> Sequence[dict]:
        return self._tests.session_participants(int(session_id))

    def sync_session_participants(self, session_id: int, student_ids: Iterable) -> None:
        self._tests.sync_session_participants(int(session_id), {"student_ids": parse_ids(student_ids)})

    def session_records(self, session_id: int, *, record_type_id=None) -> Sequence[dict]:
        return self._tests.session_records(int(session_id), {"record_type_id": record_type_id or None})

    def save_session_records(self, session_id: int, *, record_type_id, values: Mapping) -> int:
        """Store one event's results for the session; blank cells are skipped."""
        type_id = require_positive_int(record_type_id, "종목을 선택하세요")
        records = []
        for student_id, raw in values.items():
            value = parse_number(raw, "기록은 숫자로 입력하세요")
            if value is None:
                continue
            records.append({"student_id": int(student_id), "record_type_id": type_id, "value": value})
        if not records:
            raise ValidationError("저장할 기록이 없습니다")
        self._tests.save_session_records(int(session_id), {"records": records})
        return len(records)

    def update_session_record(self, session_id: int, record_id: int, *, value, notes: str = "") -> None:
        number = parse_number(value, "기록은 숫자로 입력하세요")
        self._tests.update_session_record(
            int(session_id), int(record_id), compact({"value": number, "notes": optional_text(notes)})
        )

    def delete_session_record(self, session_id: int, record_id: int) -> None:
        self._tests.delete_session_record(int(session_id), int(record_id))

    # rankings
    def rankings(self, test_id: int) -> Sequence[dict]:
        return self._tests.rankings(int(test_id))

    def rankings_workbook(self, test_id: int) -> io.BytesIO:
        try:
            record_types = [t for t in self._record_types.list_types() if t.is_active]
        except ApiError as e:
            logger.warning("record types unavailable for ranking export: %s", e)
            record_types = []
        return rankings_workbook(self.rankings(test_id), record_types)


class TrainingSettingsService:
    def __init__(self, stats: TrainingStatsRepository):
        self._stats = stats

    def get(self) -> dict:
        return self._stats.get_settings() or {}

    def update(self, form: Mapping[str, str], *, default_time_slots: Iterable[str] = ()) -> None:
        slots = [s for s in default_time_slots if s]
        for s in slots:
            require_choice(s, _TIME_SLOTS, "시간대 값이 올바르지 않습니다")
        count = optional_int(form.get("record_display_count"), "표시 개수는 숫자로 입력하세요")
        if count is not None and count < 1:
            raise ValidationError("표시 개수는 1 이상이어야 합니다")
        slug = optional_text(form.get("scoreboard_slug"))
        if slug and not re.match(r"^[a-z0-9][a-z0-9-]{1,48}[a-z0-9]$", slug):
            raise ValidationError("공개 주소는 영문 소문자, 숫자, '-'만 사용할 수 있습니다")
        self._stats.update_settings(
            compact(
                {
                    "default_time_slots": slots,
                    "record_display_count": count,
                    "allow_self_record": form.get("allow_self_record") in ("on", "true", "1"),
                    "scoreboard_enabled": form.get("scoreboard_enabled") in ("on", "true", "1"),
                    "scoreboard_slug": slug,
                }
            )
        )
