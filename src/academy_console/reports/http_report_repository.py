from __future__ import annotations

from typing import Optional

from ..api.client import ApiClient, Download
from ..api.http_base import unwrap_item
from .repository import ReportRepository


class HttpReportRepository(ReportRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def dashboard(self, params: Optional[dict] = None) -> Optional[dict]:
        return unwrap_item(self._client.get("/reports/dashboard", params=params))

    def performance(self, params: Optional[dict] = None) -> Optional[dict]:
        return unwrap_item(self._client.get("/reports/performance", params=params))

    def export(self, report_type: str, params: Optional[dict] = None) -> Download:
        year_month = (params or {}).get("year_month") or "all"
        return self._client.download(
            f"/reports/export/{report_type}",
            params=params,
            default_filename=f"report-{report_type}-{year_month}.csv",
        )
