"""Descriptors rendered by the generic ``page.html`` template.

Controllers describe a page as tables, forms and batch grids; the template
only lays them out. Cells are formatted with :func:`render_cell`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.formatting import format_date, format_krw


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    fmt: Optional[str] = None
    labels: Optional[Mapping] = None


@dataclass(frozen=True)
class Link:
    label: str
    url: str
    method: str = "get"
    confirm: Optional[str] = None


@dataclass(frozen=True)
class Table:
    columns: Sequence[Column]
    rows: Sequence[Mapping]
    title: Optional[str] = None
    row_url: Optional[Callable[[Mapping], str]] = None
    row_actions: Optional[Callable[[Mapping], Sequence[Link]]] = None
    empty: str = "데이터가 없습니다"


@dataclass(frozen=True)
class Field:
    name: str
    label: str
    kind: str = "text"
    options: Optional[Mapping[str, str]] = None
    required: bool = False
    placeholder: str = ""
    help: str = ""


@dataclass(frozen=True)
class FormBlock:
    action: str
    fields: Sequence[Field]
    title: Optional[str] = None
    values: Mapping[str, Any] = field(default_factory=dict)
    submit_label: str = "저장"
    method: str = "post"


@dataclass(frozen=True)
class GridRow:
    """One editable row of a batch form (a student and their current value)."""

    row_id: Any
    label: str
    value: Any = None
    note: str = ""


@dataclass(frozen=True)
class Grid:
    action: str
    rows: Sequence[GridRow]
    input_prefix: str
    title: Optional[str] = None
    kind: str = "select"
    options: Optional[Mapping[str, str]] = None
    hidden: Mapping[str, Any] = field(default_factory=dict)
    submit_label: str = "일괄 저장"


def render_cell(row: Mapping, column: Column) -> str:
    value = row.get(column.key)
    if column.fmt == "krw":
        return format_krw(value)
    if column.fmt == "date":
        return format_date(value)
    if column.labels is not None:
        if value in (None, ""):
            return "-"
        return str(column.labels.get(value, value))
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "예" if value else "아니오"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def grid_values(form: Mapping[str, str], prefix: str) -> dict[int, str]:
    """``{row_id: value}`` from grid inputs named ``<prefix><row_id>``; blanks are skipped."""
    out: dict[int, str] = {}
    for key, value in form.items():
        if not key.startswith(prefix):
            continue
        suffix = key[len(prefix):]
        if suffix.isdigit() and (value or "").strip():
            out[int(suffix)] = value.strip()
    return out
