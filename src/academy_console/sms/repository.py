from __future__ import annotations

from typing import Optional, Protocol, Sequence


class SmsRepository(Protocol):
    def send(self, data: dict) -> None:
        raise NotImplementedError

    def send_bulk(self, data: dict) -> Optional[dict]:
        raise NotImplementedError

    def recipients_count(self, params: Optional[dict] = None) -> int:
        raise NotImplementedError

    def logs(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def sender_numbers(self) -> Sequence[dict]:
        raise NotImplementedError

    def templates(self) -> Sequence[dict]:
        raise NotImplementedError

    def create_template(self, data: dict) -> None:
        raise NotImplementedError

    def update_template(self, template_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete_template(self, template_id: int) -> None:
        raise NotImplementedError

    def test_send(self, data: dict) -> None:
        raise NotImplementedError
