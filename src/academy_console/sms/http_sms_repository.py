from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient
from ..api.http_base import as_int, unwrap_item, unwrap_list
from .repository import SmsRepository


class HttpSmsRepository(SmsRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def send(self, data: dict) -> None:
        self._client.post("/sms/send", data)

    def send_bulk(self, data: dict) -> Optional[dict]:
        return unwrap_item(self._client.post("/sms/send-bulk", data))

    def recipients_count(self, params: Optional[dict] = None) -> int:
        r = unwrap_item(self._client.get("/sms/recipients-count", params=params))
        return as_int((r or {}).get("count"))

    def logs(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get("/sms/logs", params=params))

    def sender_numbers(self) -> Sequence[dict]:
        return unwrap_list(self._client.get("/sms/sender-numbers"))

    def templates(self) -> Sequence[dict]:
        return unwrap_list(self._client.get("/notifications/templates"))

    def create_template(self, data: dict) -> None:
        self._client.post("/notifications/templates", data)

    def update_template(self, template_id: int, data: dict) -> None:
        self._client.put(f"/notifications/templates/{int(template_id)}", data)

    def delete_template(self, template_id: int) -> None:
        self._client.delete(f"/notifications/templates/{int(template_id)}")

    def test_send(self, data: dict) -> None:
        self._client.post("/notifications/test", data)
