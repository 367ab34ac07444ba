from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from academy_console.api.token_store import ACADEMY_ID_KEY, REFRESH_TOKEN_KEY, TOKEN_KEY, USER_KEY, MemoryTokenStore
from academy_console.auth.model import LoginResult, User
from academy_console.auth.service import AuthService
from academy_console.core.enums import UserRole
from academy_console.core.exceptions import ApiError, AuthenticationError, ValidationError

OWNER = User(user_id=1, email="owner@academy.test", name="원장", role=UserRole.OWNER, academy_id=7, modules=("core",))


@dataclass
class InMemoryAuth:
    passwords: dict[str, str]
    me_user: Optional[User] = None
    me_calls: int = 0
    registered: list[dict] = field(default_factory=list)
    resets: list[tuple[str, str]] = field(default_factory=list)

    def login(self, *, email: str, password: str) -> LoginResult:
        if self.passwords.get(email) != password:
            raise ApiError("invalid credentials", status_code=400)
        return LoginResult(token="tok-1", refresh_token="ref-1", user=OWNER)

    def me(self) -> Optional[User]:
        self.me_calls += 1
        return self.me_user

    def register(self, data: dict) -> None:
        self.registered.append(data)

    def forgot_password(self, *, email: str) -> None:
        pass

    def reset_password(self, *, token: str, password: str) -> None:
        self.resets.append((token, password))


@pytest.fixture
def auth_repo():
    return InMemoryAuth(passwords={"owner@academy.test": "secret1"})


@pytest.fixture
def store():
    return MemoryTokenStore()


def test_login_stores_token_academy_and_user(auth_repo, store):
    user = AuthService(auth_repo, store).login(" owner@academy.test ", "secret1")

    assert user == OWNER
    assert store.get(TOKEN_KEY) == "tok-1"
    assert store.get(REFRESH_TOKEN_KEY) == "ref-1"
    assert store.get(ACADEMY_ID_KEY) == "7"
    assert store.get(USER_KEY)["role"] == "owner"


def test_login_wrong_password(auth_repo, store):
    with pytest.raises(AuthenticationError):
        AuthService(auth_repo, store).login("owner@academy.test", "nope")
    assert store.get(TOKEN_KEY) is None


def test_login_requires_both_fields(auth_repo, store):
    with pytest.raises(ValidationError):
        AuthService(auth_repo, store).login("", "secret1")


def test_current_user_uses_cached_copy(auth_repo, store):
    service = AuthService(auth_repo, store)
    service.login("owner@academy.test", "secret1")

    user = service.current_user()

    assert user.email == "owner@academy.test"
    assert user.role == UserRole.OWNER
    assert auth_repo.me_calls == 0


def test_current_user_fetches_me_when_only_token_known(auth_repo, store):
    auth_repo.me_user = OWNER
    store.set(TOKEN_KEY, "tok-1")

    assert AuthService(auth_repo, store).current_user() == OWNER
    assert auth_repo.me_calls == 1
    assert store.get(USER_KEY)["email"] == OWNER.email


def test_current_user_without_token(auth_repo, store):
    assert AuthService(auth_repo, store).current_user() is None
    assert auth_repo.me_calls == 0


def test_logout_clears_everything(auth_repo, store):
    service = AuthService(auth_repo, store)
    service.login("owner@academy.test", "secret1")

    service.logout()

    for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, ACADEMY_ID_KEY, USER_KEY):
        assert store.get(key) is None
    assert service.is_authenticated() is False


def test_register_validation(auth_repo, store):
    service = AuthService(auth_repo, store)
    base = dict(email="a@b.c", password="secret1", password_confirm="secret1", name="홍길동", phone="", academy_name="체대입시", agreed=True)

    with pytest.raises(ValidationError):
        service.register(**{**base, "password_confirm": "secret2"})
    with pytest.raises(ValidationError):
        service.register(**{**base, "password": "123", "password_confirm": "123"})
    with pytest.raises(ValidationError):
        service.register(**{**base, "agreed": False})
    with pytest.raises(ValidationError):
        service.register(**{**base, "academy_name": " "})

    service.register(**base)
    assert auth_repo.registered == [
        {"email": "a@b.c", "password": "secret1", "name": "홍길동", "phone": "", "academy_name": "체대입시"}
    ]


def test_reset_password_needs_token(auth_repo, store):
    service = AuthService(auth_repo, store)

    with pytest.raises(ValidationError):
        service.reset_password(token="", password="secret1", password_confirm="secret1")

    service.reset_password(token=" abc ", password="secret1", password_confirm="secret1")
    assert auth_repo.resets == [("abc", "secret1")]
