from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence

from ..common.validators import compact, optional_text, require_choice, require_non_empty
from ..core.exceptions import ValidationError
from .repository import SmsRepository

TARGETS = {"all_students": "전체 학생", "parents": "학부모", "selected": "특정 학생"}
STATUS_FILTERS = {"active": "재원", "trial": "체험", "paused": "휴원", "all": "전체"}
MESSAGE_TYPES = {"sms": "SMS", "lms": "LMS", "alimtalk": "알림톡"}

# Character limits shown next to the message box.
MESSAGE_LIMITS = {"sms": 90, "lms": 2000}

_PHONE_RE = re.compile(r"^0\d{1,2}-?\d{3,4}-?\d{4}$")


def normalize_phone(phone: str) -> str:
    phone = require_non_empty(phone, "수신 번호를 입력하세요").replace(" ", "")
    if not _PHONE_RE.match(phone):
        raise ValidationError("전화번호 형식이 올바르지 않습니다")
    return phone.replace("-", "")


class SmsService:
    def __init__(self, sms: SmsRepository):
        self._sms = sms

    def send(self, *, phone: str, message: str, message_type: str = "sms") -> None:
        phone = normalize_phone(phone)
        message = require_non_empty(message, "메시지를 입력하세요")
        message_type = require_choice(message_type or "sms", MESSAGE_TYPES, "메시지 종류를 선택하세요")
        self._sms.send({"phone": phone, "message": message, "message_type": message_type})

    def send_bulk(self, form: Mapping[str, str]) -> dict:
        target = require_choice(form.get("target") or "all_students", TARGETS, "발송 대상을 선택하세요")
        status_filter = require_choice(form.get("status_filter") or "active", STATUS_FILTERS, "학생 상태를 선택하세요")
        message_type = require_choice(form.get("message_type") or "sms", MESSAGE_TYPES, "메시지 종류를 선택하세요")
        message = require_non_empty(form.get("message"), "메시지를 입력하세요")
        limit = MESSAGE_LIMITS.get(message_type)
        if limit and len(message) > limit:
            raise ValidationError(f"메시지는 {limit}자 이내로 입력하세요")
        return (
            self._sms.send_bulk(
                {"target": target, "status_filter": status_filter, "message_type": message_type, "message": message}
            )
            or {}
        )

    def recipients_count(self, *, target: str = "all_students", status: str = "active") -> int:
        return self._sms.recipients_count({"target": target, "status": status})

    def logs(self, *, page: int = 1, limit: int = 20) -> Sequence[dict]:
        return self._sms.logs({"page": max(1, int(page)), "limit": limit})

    def sender_numbers(self) -> Sequence[dict]:
        return self._sms.sender_numbers()

    def templates(self) -> Sequence[dict]:
        return self._sms.templates()

    @staticmethod
    def _template_payload(form: Mapping[str, str]) -> dict:
        return compact(
            {
                "type": require_non_empty(form.get("type"), "템플릿 종류를 입력하세요"),
                "content": require_non_empty(form.get("content"), "템플릿 내용을 입력하세요"),
                "name": optional_text(form.get("name")),
            }
        )

    def create_template(self, form: Mapping[str, str]) -> None:
        self._sms.create_template(self._template_payload(form))

    def update_template(self, template_id: int, form: Mapping[str, str]) -> None:
        self._sms.update_template(int(template_id), self._template_payload(form))

    def delete_template(self, template_id: int) -> None:
        self._sms.delete_template(int(template_id))

    def test_send(self, *, template_type: str, phone: Optional[str] = None) -> None:
        data = {"type": require_non_empty(template_type, "템플릿 종류를 선택하세요")}
        if phone and phone.strip():
            data["phone"] = normalize_phone(phone)
        self._sms.test_send(data)
