from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, flash, g, redirect, render_template, request, url_for

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.permissions import has_module, has_permission
from .branches.controller import register as register_branches
from .common.formatting import format_date, format_krw
from .config import get_settings_module
from .consultations.controller import register as register_consultations
from .consultations.public_controller import register as register_public_booking
from .container import Container, build_container
from .core.exceptions import ApiError, AuthenticationError, AuthorizationError
from .instructors.controller import register as register_instructors
from .payments.controller import register as register_payments
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .scoreboard.controller import register as register_scoreboard
from .seasons.controller import register as register_seasons
from .settings.controller import register as register_settings
from .sms.controller import register as register_sms
from .staff.controller import register as register_staff
from .students.controller import register as register_students
from .training.catalog_controller import register as register_training_catalog
from .training.daily_controller import register as register_training_daily
from .training.records_controller import register as register_training_records
from .training.tests_controller import register as register_training_tests
from .web.guards import is_public_path
from .web.navigation import visible_menu
from .web.views import render_cell

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # requests/urllib3 connection chatter
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _install_template_context(app: Flask, container: Container) -> None:
    app.jinja_env.globals.update(
        format_krw=format_krw,
        format_date=format_date,
        render_cell=render_cell,
        has_permission=has_permission,
        has_module=has_module,
        visible_menu=visible_menu,
    )

    @app.context_processor
    def inject_user():
        if is_public_path(request.path):
            return {"current_user": None, "branch_state": None}
        user = g.get("current_user")
        if user is None:
            try:
                user = container.auth_service.current_user()
            except ApiError as e:
                logger.info("current user unavailable: %s", e)
                user = None
        branch_state = container.academy_context.fetch() if user is not None else None
        return {"current_user": user, "branch_state": branch_state}


def _install_error_handlers(app: Flask, container: Container) -> None:
    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(e: AuthenticationError):
        container.auth_service.logout()
        flash("세션이 만료되었습니다. 다시 로그인하세요", "warning")
        return redirect(url_for("login", next=request.path))

    @app.errorhandler(AuthorizationError)
    def handle_authorization_error(e: AuthorizationError):
        logger.info("forbidden %s: %s", request.path, e)
        return render_template("403.html", message=str(e) or None), 403

    @app.errorhandler(404)
    def handle_not_found(e):
        return render_template("public/message.html", message="존재하지 않는 페이지입니다"), 404


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(Path(__file__).resolve().parent / "templates"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s api=%s", settings_module, getattr(settings, "API_BASE_URL", ""))

    if container is None:
        container = build_container(
            api_base_url=getattr(settings, "API_BASE_URL"),
            api_timeout=float(getattr(settings, "API_TIMEOUT", 10)),
            public_base_url=getattr(settings, "PUBLIC_BASE_URL", ""),
        )

    _install_template_context(app, container)
    _install_error_handlers(app, container)

    register_auth(app, container)
    register_branches(app, container)
    register_reports(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_schedules(app, container)
    register_seasons(app, container)
    register_instructors(app, container)
    register_payments(app, container)
    register_consultations(app, container)
    register_public_booking(app, container)
    register_staff(app, container)
    register_settings(app, container)
    register_sms(app, container)
    register_training_records(app, container)
    register_training_catalog(app, container)
    register_training_daily(app, container)
    register_training_tests(app, container)
    register_scoreboard(app, container)

    return app
