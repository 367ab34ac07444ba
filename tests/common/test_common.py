import pandas as pd
import pytest

from academy_console.common.datetime_utils import format_hhmm, parse_hhmm, to_iso_date
from academy_console.common.export import rows_to_xlsx
from academy_console.common.formatting import format_date, format_krw
from academy_console.common.validators import compact, optional_int, require_positive_int, require_year_month
from academy_console.core.exceptions import ValidationError
from academy_console.training.rankings import flatten_ranking, medal, ranking_columns
from academy_console.training.model import RecordType
from academy_console.web.helpers import safe_path
from academy_console.web.views import Column, grid_values, render_cell


def test_format_krw():
    assert format_krw(1250000) == "₩1,250,000"
    assert format_krw(None) == "₩0"
    assert format_krw(3000.0) == "₩3,000"


def test_format_krw_accepts_decimal_strings():
    assert format_krw("1500000.00") == "₩1,500,000"
    assert format_krw("1,200") == "₩1,200"
    assert format_krw("12.5") == "₩12.5"
    assert format_krw("n/a") == "₩0"


def test_format_date():
    assert format_date("2026-03-02T00:00:00Z") == "2026. 3. 2."
    assert format_date("") == "-"
    assert format_date("someday") == "someday"


def test_hhmm():
    assert parse_hhmm("07:05") == 425
    assert parse_hhmm("7") is None
    assert parse_hhmm("ab:cd") is None
    assert parse_hhmm("24:00") == 1440
    assert parse_hhmm("24:59") is None
    assert parse_hhmm("25:00") is None
    assert format_hhmm(425) == "07:05"


def test_to_iso_date():
    assert to_iso_date(" 2026-10-19T09:00:00 ") == "2026-10-19"
    assert to_iso_date("") is None


def test_validators():
    assert compact({"a": 1, "b": None, "c": False}) == {"a": 1, "c": False}
    assert optional_int(" ", "x") is None
    assert require_year_month(" 2026-10 ", "x") == "2026-10"
    with pytest.raises(ValidationError):
        require_positive_int("0", "x")
    with pytest.raises(ValidationError):
        optional_int("1.5", "x")


def test_rows_to_xlsx_keeps_column_order():
    output = rows_to_xlsx(
        [{"name": "박선수", "rank": 1}, {"rank": 2}],
        {"rank": "순위", "name": "이름"},
        sheet_name="리더보드",
    )

    df = pd.read_excel(output, sheet_name="리더보드")
    assert list(df.columns) == ["순위", "이름"]
    assert df["순위"].tolist() == [1, 2]
    assert df["이름"].iloc[0] == "박선수"
    assert pd.isna(df["이름"].iloc[1])


def test_ranking_helpers():
    jump = RecordType(record_type_id=1, name="제자리멀리뛰기", unit="cm")
    situps = RecordType(record_type_id=2, name="윗몸일으키기")

    assert ranking_columns([jump, situps]) == {
        "rank": "순위",
        "student_name": "이름",
        "record_1": "제자리멀리뛰기 (cm)",
        "record_2": "윗몸일으키기",
        "total_score": "총점",
    }
    row = flatten_ranking({"rank": 1, "student_name": "박선수", "total_score": 95, "records": {"1": 285, 2: 51}}, [jump, situps])
    assert row == {"rank": 1, "student_name": "박선수", "total_score": 95, "record_1": 285, "record_2": 51}
    assert medal("1") == "금"
    assert medal(4) is None
    assert medal(None) is None


def test_render_cell():
    row = {"amount": 5000, "status": "active", "paid": True, "tags": ["하체", "순발력"], "memo": ""}

    assert render_cell(row, Column("amount", "금액", fmt="krw")) == "₩5,000"
    assert render_cell(row, Column("status", "상태", labels={"active": "재원"})) == "재원"
    assert render_cell(row, Column("paid", "납부")) == "예"
    assert render_cell(row, Column("tags", "태그")) == "하체, 순발력"
    assert render_cell(row, Column("memo", "메모")) == "-"
    assert render_cell(row, Column("missing", "없음", labels={})) == "-"


def test_grid_values_skip_blanks_and_foreign_keys():
    form = {"value_4": "285", "value_5": " ", "value_x": "1", "date": "2026-10-19", "value_6": "270"}

    assert grid_values(form, "value_") == {4: "285", 6: "270"}


def test_safe_path():
    assert safe_path("/students?page=2", "/dashboard") == "/students?page=2"
    assert safe_path("//evil.test", "/dashboard") == "/dashboard"
    assert safe_path("https://evil.test", "/dashboard") == "/dashboard"
    assert safe_path("/\\evil.test", "/dashboard") == "/dashboard"
    assert safe_path("/\t/evil.test", "/dashboard") == "/dashboard"
    assert safe_path("/reports?next=//x", "/dashboard") == "/reports?next=//x"
    assert safe_path(None, "/dashboard") == "/dashboard"
