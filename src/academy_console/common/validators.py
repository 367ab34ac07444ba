from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError

_YEAR_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def require_non_empty(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_min_length(value: Optional[str], min_len: int, message: str) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(message)
    return value


def require_positive_int(value: Any, message: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if number < 1:
        raise ValidationError(message)
    return number


def require_choice(value: Optional[str], choices: Iterable[str], message: str) -> str:
    if value not in set(choices):
        raise ValidationError(message)
    return value


def require_year_month(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not _YEAR_MONTH_RE.match(value):
        raise ValidationError(message)
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip and turn blank form values into None (dropped from the payload)."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def optional_int(value: Any, message: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)


def compact(data: dict) -> dict:
    """Drop None values so PUT/POST bodies only carry filled-in fields."""
    return {k: v for k, v in data.items() if v is not None}
