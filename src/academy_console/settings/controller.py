from __future__ import annotations

from dataclasses import asdict

from flask import Flask, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, load_item, load_list
from ..web.views import Column, Field, FormBlock, Link, Table
from .model import MODULE_OPTIONS, TUITION_CATEGORIES, WEEKLY_KEYS, AcademySettings, NotificationSettings
from .service import EVENT_TYPES

TUITION_LABELS = {"exam": "입시반", "adult": "성인반"}
SEASON_FEE_LABELS = {"exam_early": "수시 시즌", "exam_regular": "정시 시즌", "civil_service": "공무원 시즌"}

PROVIDER_OPTIONS = {"solapi": "솔라피", "sens": "네이버 SENS"}
CREDENTIAL_FIELDS = [
    Field("solapi_api_key", "솔라피 API Key"),
    Field("solapi_api_secret", "솔라피 API Secret", kind="password"),
    Field("solapi_sender", "솔라피 발신 번호", kind="tel"),
    Field("sens_access_key", "SENS Access Key"),
    Field("sens_secret_key", "SENS Secret Key", kind="password"),
    Field("sens_service_id", "SENS Service ID"),
    Field("sens_sender", "SENS 발신 번호", kind="tel"),
]


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    settings = container.settings_service

    def nav():
        return [
            Link("학원 설정", url_for("settings")),
            Link("알림 설정", url_for("settings_notifications")),
            Link("학원 일정", url_for("settings_events")),
            Link("지점 관리", url_for("settings_branches")),
        ]

    @app.route("/settings", methods=["GET", "POST"], endpoint="settings")
    @guards.permission_required("settings")
    def settings_page():
        if request.method == "POST":
            try:
                settings.update(form_data(), modules=request.form.getlist("modules"))
                flash("설정이 저장되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "설정 저장에 실패했습니다")
            else:
                # Module toggles change the sidebar.
                container.auth_service.fetch_me()
            return redirect(url_for("settings"))

        current = load_item(settings.get) or AcademySettings()
        return render_template(
            "settings/settings.html",
            settings=current,
            links=nav(),
            module_options=MODULE_OPTIONS,
            enabled_modules=settings.enabled_modules(current),
            time_slot_labels=TIME_SLOT_OPTIONS,
            tuition_categories=TUITION_CATEGORIES,
            tuition_labels=TUITION_LABELS,
            weekly_keys=WEEKLY_KEYS,
            season_fee_labels=SEASON_FEE_LABELS,
        )

    @app.route("/settings/notifications", methods=["GET", "POST"], endpoint="settings_notifications")
    @guards.permission_required("settings")
    def settings_notifications():
        if request.method == "POST":
            try:
                settings.update_notifications(form_data())
                flash("알림 설정이 저장되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "알림 설정 저장에 실패했습니다")
            return redirect(url_for("settings_notifications"))

        current = load_item(settings.notifications) or NotificationSettings()
        return render_template(
            "page.html",
            title="알림 설정",
            actions=nav(),
            forms=[
                FormBlock(
                    action=url_for("settings_notifications"),
                    fields=[Field("provider", "발송 업체", kind="select", options=PROVIDER_OPTIONS), *CREDENTIAL_FIELDS],
                    values={"provider": current.provider, **current.credentials},
                )
            ],
        )

    @app.route("/settings/events", methods=["GET", "POST"], endpoint="settings_events")
    @guards.permission_required("settings")
    def settings_events():
        if request.method == "POST":
            try:
                settings.create_event(form_data())
                flash("일정이 등록되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "일정 등록에 실패했습니다")
            return redirect(url_for("settings_events"))

        events = load_list(settings.events)
        return render_template(
            "page.html",
            title="학원 일정",
            actions=nav(),
            forms=[
                FormBlock(
                    title="일정 등록",
                    action=url_for("settings_events"),
                    fields=[
                        Field("title", "제목", required=True),
                        Field("type", "종류", kind="select", options=EVENT_TYPES),
                        Field("start_date", "시작일", kind="date", required=True),
                        Field("end_date", "종료일", kind="date"),
                        Field("description", "설명", kind="textarea"),
                    ],
                    submit_label="등록",
                )
            ],
            tables=[
                Table(
                    columns=[
                        Column("title", "제목"),
                        Column("event_type", "종류", labels=EVENT_TYPES),
                        Column("start_date", "시작일", fmt="date"),
                        Column("end_date", "종료일", fmt="date"),
                        Column("description", "설명"),
                    ],
                    rows=[asdict(e) for e in events],
                )
            ],
        )

    @app.route("/settings/branches", methods=["GET", "POST"], endpoint="settings_branches")
    @guards.permission_required("settings")
    def settings_branches():
        if request.method == "POST":
            try:
                settings.add_branch(name=request.form.get("name", ""), address=request.form.get("address", ""))
                flash("지점이 추가되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "지점 추가에 실패했습니다")
            return redirect(url_for("settings_branches"))

        return render_template(
            "page.html",
            title="지점 관리",
            actions=nav(),
            forms=[
                FormBlock(
                    title="지점 추가",
                    action=url_for("settings_branches"),
                    fields=[Field("name", "지점명", required=True), Field("address", "주소")],
                    submit_label="추가",
                ),
                FormBlock(
                    title="원장 초대",
                    action=url_for("settings_invite_owner"),
                    fields=[Field("email", "이메일", kind="email", required=True)],
                    submit_label="초대",
                ),
            ],
            tables=[Table(columns=[Column("name", "지점명"), Column("address", "주소"), Column("owner_name", "원장")], rows=settings.branches())],
        )

    @app.route("/settings/invite", methods=["POST"], endpoint="settings_invite_owner")
    @guards.permission_required("settings")
    def settings_invite_owner():
        try:
            settings.invite_owner(request.form.get("email", ""))
            flash("초대 메일을 보냈습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "초대에 실패했습니다")
        return redirect(url_for("settings_branches"))
