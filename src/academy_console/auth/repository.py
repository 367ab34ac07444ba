from __future__ import annotations

from typing import Optional, Protocol

from .model import LoginResult, User


class AuthRepository(Protocol):
    def login(self, *, email: str, password: str) -> LoginResult:
        raise NotImplementedError

    def me(self) -> Optional[User]:
        raise NotImplementedError

    def register(self, data: dict) -> None:
        raise NotImplementedError

    def forgot_password(self, *, email: str) -> None:
        raise NotImplementedError

    def reset_password(self, *, token: str, password: str) -> None:
        raise NotImplementedError
