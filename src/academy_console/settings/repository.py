from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademyEvent, AcademySettings, NotificationSettings


class SettingsRepository(Protocol):
    """Academy-wide settings, notification provider, events and organization."""

    def get(self) -> Optional[AcademySettings]:
        raise NotImplementedError

    def update(self, data: dict) -> None:
        raise NotImplementedError

    def notifications(self) -> Optional[NotificationSettings]:
        raise NotImplementedError

    def update_notifications(self, data: dict) -> None:
        raise NotImplementedError

    def events(self) -> Sequence[AcademyEvent]:
        raise NotImplementedError

    def create_event(self, data: dict) -> None:
        raise NotImplementedError

    def branches(self) -> Sequence[dict]:
        raise NotImplementedError

    def add_branch(self, data: dict) -> None:
        raise NotImplementedError

    def invite_owner(self, data: dict) -> None:
        raise NotImplementedError
