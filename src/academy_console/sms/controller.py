from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, load_list
from ..web.views import Column, Field, FormBlock, Link, Table
from .service import MESSAGE_TYPES, STATUS_FILTERS, TARGETS

logger = logging.getLogger(__name__)

TEMPLATE_FIELDS = [
    Field("type", "템플릿 종류", required=True, placeholder="예: payment_reminder"),
    Field("name", "이름"),
    Field("content", "내용", kind="textarea", required=True),
]

LOG_STATUS_LABELS = {"success": "성공", "failed": "실패", "pending": "대기"}


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    sms = container.sms_service

    @app.route("/sms", endpoint="sms")
    @guards.permission_required("notifications")
    def sms_home():
        page = request.args.get("page", "1")
        senders = load_list(sms.sender_numbers)
        logs = load_list(sms.logs, page=int(page) if page.isdigit() else 1)
        templates = load_list(sms.templates)
        return render_template(
            "page.html",
            title="SMS 발송",
            pairs=[("발신 번호", ", ".join(s.get("phone", "") for s in senders) or "-")],
            forms=[
                FormBlock(
                    title="개별 발송",
                    action=url_for("sms_send"),
                    fields=[
                        Field("phone", "수신 번호", kind="tel", required=True),
                        Field("message_type", "종류", kind="select", options=MESSAGE_TYPES),
                        Field("message", "메시지", kind="textarea", required=True),
                    ],
                    submit_label="발송",
                ),
                FormBlock(
                    title="단체 발송",
                    action=url_for("sms_send_bulk"),
                    fields=[
                        Field("target", "대상", kind="select", options=TARGETS),
                        Field("status_filter", "학생 상태", kind="select", options=STATUS_FILTERS),
                        Field("message_type", "종류", kind="select", options=MESSAGE_TYPES, help="SMS 90자, LMS 2000자"),
                        Field("message", "메시지", kind="textarea", required=True),
                    ],
                    values={"target": "all_students", "status_filter": "active", "message_type": "sms"},
                    submit_label="단체 발송",
                ),
                FormBlock(
                    title="템플릿 추가",
                    action=url_for("sms_template_create"),
                    fields=TEMPLATE_FIELDS,
                    submit_label="추가",
                ),
                FormBlock(
                    title="템플릿 테스트 발송",
                    action=url_for("sms_test_send"),
                    fields=[
                        Field("template_type", "템플릿 종류", kind="select", options={t.get("type", ""): t.get("name") or t.get("type", "") for t in templates}),
                        Field("phone", "수신 번호", kind="tel"),
                    ],
                    submit_label="테스트 발송",
                ),
            ],
            tables=[
                Table(
                    title="템플릿",
                    columns=[Column("type", "종류"), Column("name", "이름"), Column("content", "내용")],
                    rows=templates,
                    row_url=lambda r: url_for("sms_template_edit", template_id=r.get("id")),
                    row_actions=lambda r: [Link("삭제", url_for("sms_template_delete", template_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")],
                ),
                Table(
                    title="발송 내역",
                    columns=[
                        Column("created_at", "발송일", fmt="date"),
                        Column("phone", "수신 번호"),
                        Column("message", "메시지"),
                        Column("message_type", "종류", labels=MESSAGE_TYPES),
                        Column("status", "결과", labels=LOG_STATUS_LABELS),
                    ],
                    rows=logs,
                ),
            ],
        )

    @app.route("/sms/send", methods=["POST"], endpoint="sms_send")
    @guards.permission_required("notifications", "create")
    def sms_send():
        try:
            sms.send(
                phone=request.form.get("phone", ""),
                message=request.form.get("message", ""),
                message_type=request.form.get("message_type", "sms"),
            )
            flash("발송되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "발송에 실패했습니다")
        return redirect(url_for("sms"))

    @app.route("/sms/send-bulk", methods=["POST"], endpoint="sms_send_bulk")
    @guards.permission_required("notifications", "create")
    def sms_send_bulk():
        try:
            result = sms.send_bulk(form_data())
        except (ValidationError, ApiError) as e:
            flash_failure(e, "발송에 실패했습니다")
        else:
            sent = result.get("sent_count", result.get("count"))
            flash(f"{sent}건 발송되었습니다" if sent is not None else "발송되었습니다", "success")
        return redirect(url_for("sms"))

    @app.route("/sms/recipients-count", endpoint="sms_recipients_count")
    @guards.permission_required("notifications")
    def sms_recipients_count():
        try:
            count = sms.recipients_count(
                target=request.args.get("target", "all_students"),
                status=request.args.get("status", "active"),
            )
        except ApiError as e:
            logger.warning("recipients count failed: %s", e)
            return jsonify({"count": None}), 502
        return jsonify({"count": count})

    @app.route("/sms/templates", methods=["POST"], endpoint="sms_template_create")
    @guards.permission_required("notifications", "create")
    def sms_template_create():
        try:
            sms.create_template(form_data())
            flash("템플릿이 추가되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "템플릿 저장에 실패했습니다")
        return redirect(url_for("sms"))

    @app.route("/sms/templates/<int:template_id>", methods=["GET", "POST"], endpoint="sms_template_edit")
    @guards.permission_required("notifications", "edit")
    def sms_template_edit(template_id: int):
        if request.method == "POST":
            try:
                sms.update_template(template_id, form_data())
                flash("템플릿이 저장되었습니다", "success")
                return redirect(url_for("sms"))
            except (ValidationError, ApiError) as e:
                flash_failure(e, "템플릿 저장에 실패했습니다")

        template = next((t for t in load_list(sms.templates) if str(t.get("id")) == str(template_id)), None)
        if template is None:
            flash("템플릿을 찾을 수 없습니다", "warning")
            return redirect(url_for("sms"))
        return render_template(
            "page.html",
            title="템플릿 수정",
            forms=[
                FormBlock(
                    action=url_for("sms_template_edit", template_id=template_id),
                    fields=TEMPLATE_FIELDS,
                    values={k: template.get(k) or "" for k in ("type", "name", "content")},
                )
            ],
            back_url=url_for("sms"),
        )

    @app.route("/sms/templates/<int:template_id>/delete", methods=["POST"], endpoint="sms_template_delete")
    @guards.permission_required("notifications", "delete")
    def sms_template_delete(template_id: int):
        try:
            sms.delete_template(template_id)
            flash("템플릿이 삭제되었습니다", "success")
        except ApiError as e:
            flash_failure(e, "삭제에 실패했습니다")
        return redirect(url_for("sms"))

    @app.route("/sms/test", methods=["POST"], endpoint="sms_test_send")
    @guards.permission_required("notifications", "create")
    def sms_test_send():
        try:
            sms.test_send(template_type=request.form.get("template_type", ""), phone=request.form.get("phone"))
            flash("테스트 메시지를 보냈습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "테스트 발송에 실패했습니다")
        return redirect(url_for("sms"))
