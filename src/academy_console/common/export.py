from __future__ import annotations

import io
from typing import Mapping, Sequence

import pandas as pd

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def rows_to_xlsx(rows: Sequence[Mapping], columns: Mapping[str, str], *, sheet_name: str = "Sheet1") -> io.BytesIO:
    """Write ``rows`` to an in-memory workbook.

    ``columns`` maps row keys to header labels and fixes the column order;
    keys missing from a row are left blank.
    """
    df = pd.DataFrame([{label: row.get(key) for key, label in columns.items()} for row in rows], columns=list(columns.values()))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name[:31])

    output.seek(0)
    return output
