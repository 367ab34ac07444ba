from __future__ import annotations

from urllib.parse import urlsplit

from flask import Flask, redirect, request, url_for

from ..container import Container
from ..web.guards import make_guards
from ..web.helpers import safe_path


def _back_path() -> str:
    target = request.form.get("next") or ""
    if not target and request.referrer:
        parts = urlsplit(request.referrer)
        target = parts.path + (f"?{parts.query}" if parts.query else "")
    return safe_path(target, url_for("dashboard"))


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)

    @app.route("/branches/switch", methods=["POST"], endpoint="switch_branch")
    @guards.login_required
    def switch_branch():
        raw = request.form.get("branch_id", "")
        branch_id = int(raw) if raw.isdigit() else None
        container.academy_context.switch_branch(branch_id)
        # Permissions and modules are per branch; refresh the cached user.
        container.auth_service.fetch_me()

        # Full reload so every page refetches with the new X-Academy-Id.
        return redirect(_back_path())
