from __future__ import annotations

import logging
from typing import Optional

from ..api.token_store import ACADEMY_ID_KEY, REFRESH_TOKEN_KEY, TOKEN_KEY, USER_KEY, TokenStore, clear_credentials
from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import ApiError, AuthenticationError, ValidationError
from .model import User, user_from_payload
from .repository import AuthRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _check_new_password(password: str, password_confirm: str) -> str:
    if password != password_confirm:
        raise ValidationError("비밀번호가 일치하지 않습니다")
    return require_min_length(password, MIN_PASSWORD_LENGTH, f"비밀번호는 {MIN_PASSWORD_LENGTH}자 이상이어야 합니다")


class AuthService:
    """Use case: sign in/out and keep the current user.

    The current user is cached next to the token so pages do not call
    ``/auth/me`` on every request; it is set on login or a successful "who am
    I" call and cleared on logout.
    """

    def __init__(self, auth: AuthRepository, tokens: TokenStore):
        self._auth = auth
        self._tokens = tokens

    def is_authenticated(self) -> bool:
        return bool(self._tokens.get(TOKEN_KEY))

    def login(self, email: str, password: str) -> User:
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("이메일과 비밀번호를 입력하세요")

        try:
            result = self._auth.login(email=email, password=password)
        except (ApiError, AuthenticationError) as e:
            logger.info("login failed for %s: %s", email, e)
            raise AuthenticationError("이메일 또는 비밀번호가 올바르지 않습니다") from e

        self._tokens.set(TOKEN_KEY, result.token)
        if result.refresh_token:
            self._tokens.set(REFRESH_TOKEN_KEY, result.refresh_token)
        if result.user.academy_id is not None:
            self._tokens.set(ACADEMY_ID_KEY, str(result.user.academy_id))
        self._tokens.set(USER_KEY, result.user.to_session())
        return result.user

    def logout(self) -> None:
        clear_credentials(self._tokens)

    def fetch_me(self) -> Optional[User]:
        try:
            user = self._auth.me()
        except (ApiError, AuthenticationError) as e:
            logger.info("fetch_me failed: %s", e)
            user = None

        if user is None:
            self._tokens.remove(USER_KEY)
            return None
        self._tokens.set(USER_KEY, user.to_session())
        return user

    def current_user(self) -> Optional[User]:
        """Cached user, fetched once per session when only the token is known."""
        if not self.is_authenticated():
            return None
        cached = self._tokens.get(USER_KEY)
        if isinstance(cached, dict):
            return user_from_payload(cached)
        return self.fetch_me()

    def register(
        self,
        *,
        email: str,
        password: str,
        password_confirm: str,
        name: str,
        phone: str,
        academy_name: str,
        agreed: bool,
    ) -> None:
        if not (email or "").strip() or not password or not (name or "").strip() or not (academy_name or "").strip():
            raise ValidationError("필수 항목을 입력하세요")
        _check_new_password(password, password_confirm)
        if not agreed:
            raise ValidationError("이용약관에 동의해주세요")

        self._auth.register(
            {
                "email": email.strip(),
                "password": password,
                "name": name.strip(),
                "phone": (phone or "").strip(),
                "academy_name": academy_name.strip(),
            }
        )

    def forgot_password(self, email: str) -> None:
        self._auth.forgot_password(email=require_non_empty(email, "이메일을 입력하세요"))

    def reset_password(self, *, token: str, password: str, password_confirm: str) -> None:
        if not password:
            raise ValidationError("비밀번호를 입력하세요")
        _check_new_password(password, password_confirm)
        if not (token or "").strip():
            raise ValidationError("유효하지 않은 링크입니다")

        self._auth.reset_password(token=token.strip(), password=password)
