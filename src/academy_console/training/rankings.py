from __future__ import annotations

import io
from typing import Mapping, Optional, Sequence

from ..common.export import rows_to_xlsx
from .model import RecordType

MEDALS = {1: "금", 2: "은", 3: "동"}


def medal(rank) -> Optional[str]:
    try:
        return MEDALS.get(int(rank))
    except (TypeError, ValueError):
        return None


def ranking_columns(record_types: Sequence[RecordType]) -> dict[str, str]:
    """Column key -> header for a ranking table, one column per event."""
    columns = {"rank": "순위", "student_name": "이름"}
    for rt in record_types:
        label = f"{rt.name} ({rt.unit})" if rt.unit else rt.name
        columns[f"record_{rt.record_type_id}"] = label
    columns["total_score"] = "총점"
    return columns


def flatten_ranking(entry: Mapping, record_types: Sequence[RecordType]) -> dict:
    """Lift the nested ``records`` mapping of a ranking entry into flat columns.

    The API keys ``records`` by record type id, as an int or a string.
    """
    records = entry.get("records") or {}
    row = {
        "rank": entry.get("rank"),
        "student_name": entry.get("student_name") or "",
        "total_score": entry.get("total_score"),
    }
    for rt in record_types:
        value = records.get(str(rt.record_type_id), records.get(rt.record_type_id))
        row[f"record_{rt.record_type_id}"] = value
    return row


def rankings_workbook(rankings: Sequence[Mapping], record_types: Sequence[RecordType], *, sheet_name: str = "순위") -> io.BytesIO:
    rows = [flatten_ranking(e, record_types) for e in rankings]
    return rows_to_xlsx(rows, ranking_columns(record_types), sheet_name=sheet_name)


LEADERBOARD_COLUMNS = {"rank": "순위", "student_name": "이름", "best_value": "최고 기록"}


def leaderboard_workbook(entries: Sequence[Mapping], *, sheet_name: str = "리더보드") -> io.BytesIO:
    return rows_to_xlsx(entries, LEADERBOARD_COLUMNS, sheet_name=sheet_name)
