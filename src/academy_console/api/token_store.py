from __future__ import annotations

from typing import Any, Optional, Protocol

from flask import session

TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refreshToken"
ACADEMY_ID_KEY = "activeAcademyId"
USER_KEY = "user"


class TokenStore(Protocol):
    """Where the bearer token, refresh token and active academy id live.

    The browser console keeps these in local storage; here they live in the
    Flask session of the signed-in browser.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class SessionTokenStore:
    """TokenStore backed by the current request's Flask session."""

    def get(self, key: str) -> Optional[Any]:
        return session.get(key)

    def set(self, key: str, value: Any) -> None:
        session[key] = value

    def remove(self, key: str) -> None:
        session.pop(key, None)


class MemoryTokenStore:
    """TokenStore kept in a dict (scripts and tests)."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


def clear_credentials(store: TokenStore) -> None:
    for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, ACADEMY_ID_KEY, USER_KEY):
        store.remove(key)
