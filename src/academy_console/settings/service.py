from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.validators import compact, optional_text, require_choice, require_non_empty
from ..core.enums import TimeSlot
from ..core.exceptions import ApiError, ValidationError
from .model import (
    MODULE_OPTIONS,
    NOTIFICATION_PROVIDERS,
    TUITION_CATEGORIES,
    WEEKLY_KEYS,
    AcademyEvent,
    AcademySettings,
    NotificationSettings,
)
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

EVENT_TYPES = {"holiday": "휴원", "event": "행사", "exam": "시험"}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _money(value, message: str) -> int:
    cleaned = re.sub(r"[^0-9]", "", str(value or ""))
    if not cleaned:
        return 0
    try:
        return int(cleaned)
    except ValueError:
        raise ValidationError(message)


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get(self) -> AcademySettings:
        return self._settings.get() or AcademySettings()

    def update(self, form: Mapping[str, str], *, modules: Iterable[str] = ()) -> None:
        """Save the academy settings form.

        Tuition inputs are named ``tuition_<category>_<weekly_n>`` and accept
        formatted numbers (``150,000``).
        """
        name = require_non_empty(form.get("name"), "학원명을 입력하세요")

        modules = [m for m in modules if m]
        for m in modules:
            require_choice(m, MODULE_OPTIONS, "알 수 없는 모듈입니다")

        data: dict = {
            "name": name,
            "phone": (form.get("phone") or "").strip(),
            "address": (form.get("address") or "").strip(),
            "modules": modules,
        }

        for slot in TimeSlot:
            start = (form.get(f"{slot.value}_start") or "").strip()
            end = (form.get(f"{slot.value}_end") or "").strip()
            if not start and not end:
                continue
            s, e = parse_hhmm(start), parse_hhmm(end)
            if s is None or e is None:
                raise ValidationError("시간 형식이 올바르지 않습니다 (HH:MM)")
            if e <= s:
                raise ValidationError("종료 시간은 시작 시간 이후여야 합니다")
            data[f"{slot.value}_start"] = start
            data[f"{slot.value}_end"] = end

        try:
            due_day = int(form.get("payment_due_day") or 10)
        except (TypeError, ValueError):
            raise ValidationError("납부일은 숫자로 입력하세요")
        if not 1 <= due_day <= 31:
            raise ValidationError("납부일은 1~31 사이여야 합니다")
        data["payment_due_day"] = due_day

        data["tuition_settings"] = {
            category: {k: _money(form.get(f"tuition_{category}_{k}"), "금액은 숫자로 입력하세요") for k in WEEKLY_KEYS}
            for category in TUITION_CATEGORIES
        }
        data["season_fees"] = {
            k: _money(form.get(f"season_fee_{k}"), "금액은 숫자로 입력하세요")
            for k in ("exam_early", "exam_regular", "civil_service")
        }

        month_type = form.get("salary_month_type") or "next"
        require_choice(month_type, ("current", "next"), "급여 지급월을 선택하세요")
        try:
            pay_day = int(form.get("salary_payment_day") or 10)
        except (TypeError, ValueError):
            raise ValidationError("급여일은 숫자로 입력하세요")
        if not 1 <= pay_day <= 31:
            raise ValidationError("급여일은 1~31 사이여야 합니다")
        data["salary_settings"] = {"payment_day": pay_day, "month_type": month_type}

        self._settings.update(data)

    def complete_onboarding(self, form: Mapping[str, str], *, modules: Iterable[str] = ()) -> None:
        """First-run setup: academy profile, modules and an optional first season."""
        name = require_non_empty(form.get("name"), "학원명을 입력하세요")
        modules = [m for m in modules if m]
        for m in modules:
            require_choice(m, MODULE_OPTIONS, "알 수 없는 모듈입니다")

        data: dict = {
            "name": name,
            "address": (form.get("address") or "").strip(),
            "phone": (form.get("phone") or "").strip(),
            "modules": modules,
        }
        season_name = optional_text(form.get("season_name"))
        if season_name:
            start = optional_text(form.get("season_start_date"))
            end = optional_text(form.get("season_end_date"))
            try:
                if start and end and parse_iso_date(end) < parse_iso_date(start):
                    raise ValidationError("종료일은 시작일 이후여야 합니다")
            except ValueError:
                raise ValidationError("날짜 형식이 올바르지 않습니다")
            data["first_season"] = compact({"name": season_name, "start_date": start, "end_date": end})
        self._settings.update(data)

    def notifications(self) -> NotificationSettings:
        return self._settings.notifications() or NotificationSettings()

    def update_notifications(self, form: Mapping[str, str]) -> None:
        provider = require_choice(form.get("provider") or "solapi", NOTIFICATION_PROVIDERS, "발송 업체를 선택하세요")
        data = {"provider": provider}
        for key, value in form.items():
            if key.startswith(("solapi_", "sens_")):
                data[key] = (value or "").strip()
        self._settings.update_notifications(data)

    def events(self) -> Sequence[AcademyEvent]:
        return self._settings.events()

    def create_event(self, form: Mapping[str, str]) -> None:
        title = (form.get("title") or "").strip()
        start = (form.get("start_date") or "").strip()
        if not title or not start:
            raise ValidationError("제목과 시작일은 필수입니다")
        end = optional_text(form.get("end_date"))
        try:
            start_day = parse_iso_date(start)
            end_day = parse_iso_date(end) if end else None
        except ValueError:
            raise ValidationError("날짜 형식이 올바르지 않습니다")
        if end_day and end_day < start_day:
            raise ValidationError("종료일은 시작일 이후여야 합니다")
        event_type = form.get("type") or "holiday"
        require_choice(event_type, EVENT_TYPES, "이벤트 종류를 선택하세요")
        self._settings.create_event(
            compact(
                {
                    "title": title,
                    "description": optional_text(form.get("description")),
                    "start_date": start,
                    "end_date": end,
                    "type": event_type,
                }
            )
        )

    def branches(self) -> Sequence[dict]:
        try:
            return self._settings.branches()
        except ApiError as e:
            logger.warning("organization branches unavailable: %s", e)
            return []

    def add_branch(self, *, name: str, address: str = "") -> None:
        self._settings.add_branch(
            compact({"name": require_non_empty(name, "지점명을 입력하세요"), "address": optional_text(address)})
        )

    def invite_owner(self, email: str) -> None:
        email = require_non_empty(email, "이메일을 입력하세요")
        if not _EMAIL_RE.match(email):
            raise ValidationError("이메일 형식이 올바르지 않습니다")
        self._settings.invite_owner({"email": email})

    @staticmethod
    def enabled_modules(settings: Optional[AcademySettings]) -> list[str]:
        return [m for m in MODULE_OPTIONS if settings and m in settings.modules]
