from __future__ import annotations

from typing import Optional, Union

from .datetime_utils import parse_iso_date


def format_krw(amount: Union[int, float, str, None]) -> str:
    """Render an amount as Korean won, e.g. ``₩1,250,000``.

    DECIMAL columns arrive as strings (``"1500000.00"``); anything that is
    not a number renders as ``₩0``.
    """
    try:
        value = float(str(amount).replace(",", "")) if amount else 0
    except ValueError:
        value = 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"₩{value:,}"


def format_date(value: Optional[str]) -> str:
    """Render an ISO date the way ko-KR locales do (``2026. 3. 2.``)."""
    if not value:
        return "-"
    try:
        d = parse_iso_date(value)
    except ValueError:
        return value
    return f"{d.year}. {d.month}. {d.day}."
