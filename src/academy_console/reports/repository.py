from __future__ import annotations

from typing import Optional, Protocol

from ..api.client import Download


class ReportRepository(Protocol):
    def dashboard(self, params: Optional[dict] = None) -> Optional[dict]:
        raise NotImplementedError

    def performance(self, params: Optional[dict] = None) -> Optional[dict]:
        raise NotImplementedError

    def export(self, report_type: str, params: Optional[dict] = None) -> Download:
        raise NotImplementedError
