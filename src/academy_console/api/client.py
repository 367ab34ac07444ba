from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT
from ..core.exceptions import ApiError, AuthenticationError, AuthorizationError, NotFoundError
from .token_store import ACADEMY_ID_KEY, TOKEN_KEY, TokenStore

logger = logging.getLogger(__name__)

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


@dataclass
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT


@dataclass(frozen=True)
class Download:
    """Binary payload of an export endpoint."""

    content: bytes
    filename: str
    mimetype: str


class ApiClient:
    """Thin wrapper around the academy REST API.

    Every request carries the bearer token and the active academy id from the
    token store. A 401 clears the token and raises AuthenticationError so the
    console can send the user back to the login page.
    """

    def __init__(self, config: ApiConfig, tokens: TokenStore, *, session: Optional[requests.Session] = None):
        self._config = config
        self._tokens = tokens
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    def _url(self, path: str) -> str:
        return self._config.base_url.rstrip("/") + "/" + path.lstrip("/")

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        token = self._tokens.get(TOKEN_KEY)
        academy_id = self._tokens.get(ACADEMY_ID_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if academy_id:
            headers["X-Academy-Id"] = str(academy_id)
        return headers

    @staticmethod
    def _clean_params(params: Optional[dict]) -> Optional[dict]:
        if not params:
            return None
        return {k: v for k, v in params.items() if v is not None and v != ""}

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "요청에 실패했습니다"
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if body.get(key):
                    return str(body[key])
        return response.reason or "요청에 실패했습니다"

    def request(self, method: str, path: str, *, params: Optional[dict] = None, json: Any = None) -> requests.Response:
        try:
            response = self._session.request(
                method,
                self._url(path),
                params=self._clean_params(params),
                json=json,
                headers=self._headers(),
                timeout=self._config.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("API %s %s failed: %s", method, path, e)
            raise ApiError(str(e)) from e

        if response.status_code == 401:
            self._tokens.remove(TOKEN_KEY)
            logger.info("API %s %s returned 401, token cleared", method, path)
            raise AuthenticationError("로그인이 필요합니다")

        if response.status_code == 403:
            logger.info("API %s %s returned 403", method, path)
            raise AuthorizationError(self._error_message(response))

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.warning("API %s %s -> %s: %s", method, path, response.status_code, message)
            error_cls = NotFoundError if response.status_code == 404 else ApiError
            raise error_cls(message, status_code=response.status_code)

        return response

    def _json(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("응답 형식이 올바르지 않습니다", status_code=response.status_code) from e

    def get(self, path: str, *, params: Optional[dict] = None) -> Any:
        return self._json(self.request("GET", path, params=params))

    def post(self, path: str, data: Any = None, *, params: Optional[dict] = None) -> Any:
        return self._json(self.request("POST", path, params=params, json=data))

    def put(self, path: str, data: Any = None) -> Any:
        return self._json(self.request("PUT", path, json=data))

    def delete(self, path: str) -> Any:
        return self._json(self.request("DELETE", path))

    def download(self, path: str, *, params: Optional[dict] = None, default_filename: str = "export") -> Download:
        response = self.request("GET", path, params=params)
        filename = default_filename
        match = _FILENAME_RE.search(response.headers.get("Content-Disposition", ""))
        if match:
            filename = match.group(1)
        mimetype = response.headers.get("Content-Type", "application/octet-stream").split(";")[0]
        return Download(content=response.content, filename=filename, mimetype=mimetype)
