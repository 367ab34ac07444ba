from __future__ import annotations

from typing import Mapping, Optional

from ..api.client import Download
from ..api.http_base import as_float
from ..common.datetime_utils import current_year_month
from ..common.validators import require_choice, require_year_month
from .repository import ReportRepository

PERIODS = {"week": "주간", "month": "월간", "quarter": "분기", "year": "연간"}

EXPORT_TYPES = {
    "financial": "재무 리포트",
    "attendance": "출결 리포트",
    "students": "학생 목록",
    "consultations": "상담 내역",
    "salaries": "급여 내역",
    "performance": "성과 분석",
}


class ReportService:
    def __init__(self, reports: ReportRepository):
        self._reports = reports

    def dashboard(self, *, period: Optional[str] = None) -> dict:
        period = require_choice(period or "month", PERIODS, "조회 기간이 올바르지 않습니다")
        return self._reports.dashboard({"period": period}) or {}

    def performance(self, *, year_month: Optional[str] = None) -> dict:
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._reports.performance({"year_month": year_month}) or {}

    def export(self, report_type: str, *, year_month: Optional[str] = None) -> Download:
        report_type = require_choice(report_type, EXPORT_TYPES, "알 수 없는 리포트 종류입니다")
        year_month = require_year_month(year_month or current_year_month(), "조회월 형식이 올바르지 않습니다 (YYYY-MM)")
        return self._reports.export(report_type, {"year_month": year_month})

    @staticmethod
    def monthly_trend(data: Mapping) -> tuple[list[dict], float]:
        """Trend points with numeric amounts, and the bar scale (never 0)."""
        points = [
            {"month": p.get("month"), "amount": as_float(p.get("amount")) or 0}
            for p in data.get("monthly_trend") or ()
            if isinstance(p, Mapping)
        ]
        scale = as_float(data.get("max_monthly")) or max((p["amount"] for p in points), default=0) or 1
        return points, scale
