from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable

from flask import flash, g, redirect, render_template, request, url_for

from ..auth.permissions import has_module, has_permission

# Reachable without a session.
PUBLIC_PATH_PREFIXES = ("/login", "/register", "/forgot-password", "/reset-password", "/c/", "/board/", "/consultation/", "/static/")


def is_public_path(path: str) -> bool:
    return path.startswith(PUBLIC_PATH_PREFIXES)


@dataclass(frozen=True)
class Guards:
    login_required: Callable
    permission_required: Callable
    module_required: Callable
    feature_required: Callable


def make_guards(container) -> Guards:
    """Route decorators bound to the container's auth service."""

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = container.auth_service.current_user()
            if user is None:
                flash("로그인이 필요합니다", "warning")
                return redirect(url_for("login", next=request.path))
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    def permission_required(page: str, action: str = "view"):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if not has_permission(g.current_user, page, action):
                    return render_template("403.html"), 403
                return view(*args, **kwargs)

            return login_required(wrapper)

        return decorator

    def module_required(module: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if not has_module(g.current_user, module):
                    return render_template("403.html"), 403
                return view(*args, **kwargs)

            return login_required(wrapper)

        return decorator

    def feature_required(module: str, page: str, action: str = "view"):
        """Module switched on for the academy and the page permission granted."""

        def decorator(view):
            return module_required(module)(permission_required(page, action)(view))

        return decorator

    return Guards(
        login_required=login_required,
        permission_required=permission_required,
        module_required=module_required,
        feature_required=feature_required,
    )
