from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..container import Container
from ..core.exceptions import ApiError, AuthenticationError, ValidationError
from ..settings.model import MODULE_OPTIONS
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, is_checked, safe_path

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    auth = container.auth_service

    @app.route("/", endpoint="index")
    def index():
        return redirect(url_for("dashboard"))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET" and auth.current_user() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            try:
                user = auth.login(request.form.get("email", ""), request.form.get("password", ""))
            except (ValidationError, AuthenticationError) as e:
                flash(str(e), "danger")
                return render_template("auth/login.html", email=request.form.get("email", "")), 401
            logger.info("user %s signed in", user.email)
            return redirect(safe_path(request.args.get("next"), url_for("dashboard")))

        return render_template("auth/login.html", email="")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        auth.logout()
        flash("로그아웃되었습니다", "success")
        return redirect(url_for("login"))

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if request.method == "POST":
            try:
                auth.register(
                    email=request.form.get("email", ""),
                    password=request.form.get("password", ""),
                    password_confirm=request.form.get("password_confirm", ""),
                    name=request.form.get("name", ""),
                    phone=request.form.get("phone", ""),
                    academy_name=request.form.get("academy_name", ""),
                    agreed=is_checked("agreed"),
                )
            except (ValidationError, ApiError) as e:
                flash_failure(e, "회원가입에 실패했습니다")
                return render_template("auth/register.html", form=form_data())
            flash("가입이 완료되었습니다. 로그인해주세요", "success")
            return redirect(url_for("login"))

        return render_template("auth/register.html", form={})

    @app.route("/forgot-password", methods=["GET", "POST"], endpoint="forgot_password")
    def forgot_password():
        if request.method == "POST":
            try:
                auth.forgot_password(request.form.get("email", ""))
            except (ValidationError, ApiError) as e:
                flash_failure(e, "요청에 실패했습니다")
                return render_template("auth/forgot_password.html")
            flash("비밀번호 재설정 메일을 보냈습니다", "success")
            return redirect(url_for("login"))

        return render_template("auth/forgot_password.html")

    @app.route("/reset-password", methods=["GET", "POST"], endpoint="reset_password")
    def reset_password():
        token = request.values.get("token", "")
        if request.method == "POST":
            try:
                auth.reset_password(
                    token=token,
                    password=request.form.get("password", ""),
                    password_confirm=request.form.get("password_confirm", ""),
                )
            except (ValidationError, ApiError) as e:
                flash_failure(e, "비밀번호 변경에 실패했습니다")
                return render_template("auth/reset_password.html", token=token)
            flash("비밀번호가 변경되었습니다", "success")
            return redirect(url_for("login"))

        return render_template("auth/reset_password.html", token=token)

    @app.route("/onboarding", methods=["GET", "POST"], endpoint="onboarding")
    @guards.login_required
    def onboarding():
        if request.method == "POST":
            try:
                container.settings_service.complete_onboarding(form_data(), modules=request.form.getlist("modules"))
            except (ValidationError, ApiError) as e:
                flash_failure(e, "설정 저장에 실패했습니다")
                return render_template(
                    "auth/onboarding.html",
                    form={**form_data(), "modules": request.form.getlist("modules")},
                    module_options=MODULE_OPTIONS,
                    user=g.current_user,
                )
            # Modules changed; refresh the cached user.
            auth.fetch_me()
            flash("설정이 완료되었습니다", "success")
            return redirect(url_for("dashboard"))

        return render_template(
            "auth/onboarding.html",
            form={"modules": ["training"]},
            module_options=MODULE_OPTIONS,
            user=g.current_user,
        )
