from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from academy_console.api.token_store import ACADEMY_ID_KEY, TOKEN_KEY, USER_KEY, MemoryTokenStore
from academy_console.container import build_container
from academy_console.main import create_app

API_BASE_URL = "http://api.test/api/v1"


class FakeResponse:
    """The parts of requests.Response the api client reads."""

    def __init__(self, status_code: int = 200, payload: Any = None, *, headers: Optional[dict] = None, content: Optional[bytes] = None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.content = content
        self.text = content.decode("utf-8", "replace")
        self.reason = "OK" if status_code < 400 else "Error"

    def json(self):
        if self._payload is None:
            raise ValueError("no json body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; answers from a (method, path) table.

    Unknown routes answer 404 so optional endpoints fall back the way they do
    against a real API without the feature.
    """

    def __init__(self, base_url: str = API_BASE_URL):
        self.base_url = base_url
        self.headers: dict = {}
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[dict] = []

    def add(self, method: str, path: str, response: Any) -> None:
        if not isinstance(response, (FakeResponse, Exception)):
            response = FakeResponse(200, response)
        self.routes[(method.upper(), path)] = response

    def fail(self, method: str, path: str, status_code: int, payload: Any = None) -> None:
        self.routes[(method.upper(), path)] = FakeResponse(status_code, payload)

    def attach(self, path: str, content: bytes, *, filename: str, mimetype: str) -> None:
        headers = {"Content-Disposition": f'attachment; filename="{filename}"', "Content-Type": mimetype}
        self.routes[("GET", path)] = FakeResponse(200, content=content, headers=headers)

    def request(self, method, url, *, params=None, json=None, headers=None, timeout=None):
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        self.calls.append({"method": method, "path": path, "params": params, "json": json, "headers": headers or {}})
        response = self.routes.get((method.upper(), path))
        if response is None:
            return FakeResponse(404, {"message": "not found"})
        if isinstance(response, Exception):
            raise response
        return response

    def last(self, method: str, path: str) -> Optional[dict]:
        for call in reversed(self.calls):
            if call["method"] == method and call["path"] == path:
                return call
        return None


OWNER = {
    "id": 1,
    "email": "owner@academy.test",
    "name": "원장",
    "role": "owner",
    "academy_id": 7,
    "permissions": None,
    "modules": ["core", "finance", "consultation", "training", "admin"],
}


@pytest.fixture
def fake_api() -> FakeSession:
    return FakeSession()


@pytest.fixture
def tokens() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def container(fake_api, tokens):
    return build_container(
        api_base_url=API_BASE_URL,
        api_timeout=2.0,
        public_base_url="http://console.test",
        tokens=tokens,
        session=fake_api,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sign_in(tokens):
    """Put a user into the token store as if they had logged in."""

    def _sign_in(user: Optional[dict] = None) -> dict:
        user = dict(user or OWNER)
        tokens.set(TOKEN_KEY, "test-token")
        tokens.set(ACADEMY_ID_KEY, str(user.get("academy_id") or 7))
        tokens.set(USER_KEY, {**user, "user_id": user["id"]})
        return user

    return _sign_in
