from __future__ import annotations

from typing import Optional

from ..api.client import ApiClient
from ..api.http_base import unwrap_item
from ..core.exceptions import ApiError
from .model import LoginResult, User, user_from_payload
from .repository import AuthRepository


class HttpAuthRepository(AuthRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, *, email: str, password: str) -> LoginResult:
        r = unwrap_item(self._client.post("/auth/login", {"email": email, "password": password}))
        if not r or not r.get("token") or not isinstance(r.get("user"), dict):
            raise ApiError("로그인 응답이 올바르지 않습니다")
        return LoginResult(
            token=str(r["token"]),
            refresh_token=r.get("refresh_token"),
            user=user_from_payload(r["user"]),
        )

    def me(self) -> Optional[User]:
        r = unwrap_item(self._client.get("/auth/me"))
        return user_from_payload(r) if r else None

    def register(self, data: dict) -> None:
        self._client.post("/auth/register", data)

    def forgot_password(self, *, email: str) -> None:
        self._client.post("/auth/forgot-password", {"email": email})

    def reset_password(self, *, token: str, password: str) -> None:
        self._client.post("/auth/reset-password", {"token": token, "password": password})
