from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from flask import flash, request

from ..core.constants import GENERIC_FAILURE_MESSAGE
from ..core.exceptions import ApiError, ValidationError

logger = logging.getLogger(__name__)


def flash_failure(error: Exception, message: str = GENERIC_FAILURE_MESSAGE) -> None:
    """Validation messages are shown as-is; API failures get one fixed message."""
    if isinstance(error, ValidationError):
        flash(str(error), "danger")
        return
    logger.warning("%s: %s", message, error)
    flash(message, "danger")


def load_list(fn: Callable[..., Any], *args, **kwargs) -> list:
    """Call a list loader; the page renders empty when it fails."""
    try:
        return list(fn(*args, **kwargs) or [])
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        logger.warning("list load failed (%s): %s", getattr(fn, "__qualname__", fn), e)
        flash("목록을 불러오지 못했습니다", "danger")
    return []


def load_item(fn: Callable[..., Any], *args, **kwargs) -> Optional[Any]:
    try:
        return fn(*args, **kwargs)
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        logger.warning("item load failed (%s): %s", getattr(fn, "__qualname__", fn), e)
    return None


def form_data() -> dict:
    return request.form.to_dict()


def is_checked(name: str) -> bool:
    return request.form.get(name) in ("on", "true", "1")


def prefixed_values(prefix: str) -> dict[str, str]:
    """``{suffix: value}`` for form fields named ``<prefix><suffix>``."""
    return {k[len(prefix):]: v for k, v in request.form.items() if k.startswith(prefix)}


def safe_path(target: Optional[str], fallback: str) -> str:
    r"""``target`` when it is a same-site path, else ``fallback``.

    Browsers read ``\`` as ``/`` and drop tabs and newlines, so ``/\evil.test``
    and ``/\t/evil.test`` point off-site just like ``//evil.test``.
    """
    if not target or not target.startswith("/"):
        return fallback
    if any(ord(ch) < 32 for ch in target):
        return fallback
    parts = urlsplit(target.replace("\\", "/"))
    if parts.scheme or parts.netloc:
        return fallback
    return target


def run_action(fn: Callable[[], Any], *, success: str, failure: str = GENERIC_FAILURE_MESSAGE) -> bool:
    """Run a form action and flash the outcome; True when it succeeded."""
    try:
        fn()
    except (ValidationError, ApiError) as e:
        flash_failure(e, failure)
        return False
    flash(success, "success")
    return True
