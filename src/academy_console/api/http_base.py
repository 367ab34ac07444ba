from __future__ import annotations

from typing import Any, Dict, List, Optional

from .client import ApiClient


def unwrap_list(payload: Any) -> List[Dict[str, Any]]:
    """Normalize list responses.

    The API returns either a bare array or an envelope such as
    ``{"data": [...], "total": 10}``.
    """

    if payload is None:
        return []
    if isinstance(payload, list):
        return list(payload)
    if isinstance(payload, dict):
        for key in ("data", "items", "results"):
            inner = payload.get(key)
            if isinstance(inner, list):
                return list(inner)
    return []


def unwrap_item(payload: Any) -> Optional[Dict[str, Any]]:
    """Normalize single-record responses (bare object or ``{"data": {...}}``)."""

    if not isinstance(payload, dict):
        return None
    inner = payload.get("data")
    if isinstance(inner, dict):
        return inner
    return payload


def created_id(payload: Any) -> Optional[int]:
    item = unwrap_item(payload)
    if not item:
        return None
    value = item.get("id")
    return int(value) if value is not None else None


def as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    # DECIMAL columns come back as "1500000.00".
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class HttpRepository:
    """Shared CRUD plumbing for one REST collection (``/students`` ...).

    Feature repositories subclass this, set ``base_path`` and add the extra
    endpoints their resource exposes.
    """

    base_path: str = ""

    def __init__(self, client: ApiClient):
        self._client = client

    def _path(self, *parts: Any) -> str:
        return "/".join([self.base_path.rstrip("/")] + [str(p).strip("/") for p in parts])

    def list(self, params: Optional[dict] = None) -> List[Dict[str, Any]]:
        return unwrap_list(self._client.get(self.base_path, params=params))

    def get_raw(self, item_id: int) -> Optional[Dict[str, Any]]:
        return unwrap_item(self._client.get(self._path(int(item_id))))

    def create(self, data: dict) -> Optional[int]:
        return created_id(self._client.post(self.base_path, data))

    def update(self, item_id: int, data: dict) -> None:
        self._client.put(self._path(int(item_id)), data)

    def delete(self, item_id: int) -> None:
        self._client.delete(self._path(int(item_id)))
