from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient
from ..api.http_base import as_int, as_str, unwrap_item, unwrap_list
from ..core.enums import TimeSlot
from .model import (
    DEFAULT_SLOT_HOURS,
    AcademyEvent,
    AcademySettings,
    NotificationSettings,
    default_tuition,
    parse_json_field,
)
from .repository import SettingsRepository


class HttpSettingsRepository(SettingsRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def get(self) -> Optional[AcademySettings]:
        r = unwrap_item(self._client.get("/settings"))
        if not r:
            return None
        defaults = AcademySettings()
        slot_hours = {}
        for slot in TimeSlot:
            start, end = DEFAULT_SLOT_HOURS[slot.value]
            slot_hours[slot.value] = (r.get(f"{slot.value}_start") or start, r.get(f"{slot.value}_end") or end)
        return AcademySettings(
            name=r.get("name") or "",
            phone=r.get("phone") or "",
            address=r.get("address") or "",
            modules=tuple(r.get("modules") or ()),
            slot_hours=slot_hours,
            payment_due_day=as_int(r.get("payment_due_day"), defaults.payment_due_day),
            tuition_settings=parse_json_field(r.get("tuition_settings"), default_tuition()),
            season_fees=parse_json_field(r.get("season_fees"), defaults.season_fees),
            salary_settings=parse_json_field(r.get("salary_settings"), defaults.salary_settings),
        )

    def update(self, data: dict) -> None:
        self._client.put("/settings", data)

    def notifications(self) -> Optional[NotificationSettings]:
        r = unwrap_item(self._client.get("/notifications/settings"))
        if not r:
            return None
        provider = r.get("provider") or "solapi"
        return NotificationSettings(
            provider=provider,
            credentials={k: v for k, v in r.items() if k.startswith(("solapi_", "sens_"))},
        )

    def update_notifications(self, data: dict) -> None:
        self._client.put("/notifications/settings", data)

    def events(self) -> Sequence[AcademyEvent]:
        return [
            AcademyEvent(
                event_id=as_int(r.get("id")) or None,
                title=r.get("title") or "",
                start_date=str(r.get("start_date") or "")[:10],
                end_date=as_str(r.get("end_date")),
                description=r.get("description"),
                event_type=r.get("type") or "holiday",
            )
            for r in unwrap_list(self._client.get("/academy-events"))
        ]

    def create_event(self, data: dict) -> None:
        self._client.post("/academy-events", data)

    def branches(self) -> Sequence[dict]:
        return unwrap_list(self._client.get("/organization/branches"))

    def add_branch(self, data: dict) -> None:
        self._client.post("/organization/branches", data)

    def invite_owner(self, data: dict) -> None:
        self._client.post("/organization/invitations", data)
