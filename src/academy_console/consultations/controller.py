from __future__ import annotations

import logging
import re
from datetime import timedelta

from flask import Flask, abort, flash, jsonify, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import current_year_month, today_local
from ..common.qr import qr_png
from ..container import Container
from ..core.constants import WEEKDAY_KEYS, WEEKDAY_LABELS
from ..core.enums import CONSULTATION_STATUS_LABELS
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, is_checked, load_item, load_list
from ..web.views import Column, Field, FormBlock, Link, Table
from .model import ConsultationSettings
from .service import CONDUCT_RESULTS

logger = logging.getLogger(__name__)

STATUS_OPTIONS = {s.value: label for s, label in CONSULTATION_STATUS_LABELS.items()}

FIELD_TOGGLES = {"school": "학교", "grade": "학년", "sport_interest": "관심 종목", "preferred_date": "희망 일시"}

PREVIEW_DAYS = 14

_RANGE_SPLIT = re.compile(r"[,\n]")

INQUIRY_FIELDS = [
    Field("name", "이름", required=True),
    Field("phone", "연락처", kind="tel", required=True),
    Field("school", "학교"),
    Field("grade", "학년"),
    Field("sport_interest", "관심 종목"),
    Field("preferred_date", "희망 날짜", kind="date"),
    Field("preferred_time", "희망 시간", kind="time"),
    Field("memo", "메모", kind="textarea"),
]


def public_booking_url(container: Container, slug: str) -> str:
    base = container.public_base_url or request.host_url.rstrip("/")
    return f"{base}/c/{slug}"


def _weekly_hours_from_form() -> dict[str, list[str]]:
    return {key: _RANGE_SPLIT.split(request.form.get(f"hours_{key}", "")) for key in WEEKDAY_KEYS}


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    consultations = container.consultation_service
    settings = container.consultation_settings_service

    def list_table(rows):
        return Table(
            columns=[
                Column("name", "이름"),
                Column("phone", "연락처"),
                Column("grade", "학년"),
                Column("preferred_date", "희망일", fmt="date"),
                Column("preferred_time", "희망 시간"),
                Column("status", "상태", labels=STATUS_OPTIONS),
                Column("created_at", "접수일", fmt="date"),
            ],
            rows=rows,
            row_url=lambda r: url_for("consultation_detail", consultation_id=r.get("id")),
        )

    @app.route("/consultations", endpoint="consultations")
    @guards.feature_required("consultation", "consultations")
    def consultation_list():
        status = request.args.get("status", "all")
        search = request.args.get("search", "")
        rows = load_list(consultations.list, status=status, search=search)
        return render_template(
            "page.html",
            title="상담 관리",
            actions=[
                Link("상담 등록", url_for("consultation_new")),
                Link("캘린더", url_for("consultation_calendar")),
                Link("등록 학생", url_for("consultation_enrolled")),
                Link("상담 설정", url_for("consultation_settings")),
            ],
            filters=[
                Field("status", "상태", kind="select", options={"all": "전체", **STATUS_OPTIONS}),
                Field("search", "검색", placeholder="이름 또는 연락처"),
            ],
            filter_values={"status": status, "search": search},
            tables=[list_table(rows)],
        )

    @app.route("/consultations/new", methods=["GET", "POST"], endpoint="consultation_new")
    @guards.feature_required("consultation", "consultations", "create")
    def consultation_new():
        if request.method == "POST":
            try:
                consultation_id = consultations.create_inquiry(form_data())
            except (ValidationError, ApiError) as e:
                flash_failure(e, "상담 등록에 실패했습니다")
            else:
                flash("상담이 등록되었습니다", "success")
                if consultation_id:
                    return redirect(url_for("consultation_detail", consultation_id=consultation_id))
                return redirect(url_for("consultations"))

        return render_template(
            "page.html",
            title="상담 등록",
            forms=[FormBlock(action=url_for("consultation_new"), fields=INQUIRY_FIELDS, values=form_data())],
            back_url=url_for("consultations"),
        )

    @app.route("/consultations/<int:consultation_id>", endpoint="consultation_detail")
    @guards.feature_required("consultation", "consultations")
    def consultation_detail(consultation_id: int):
        consultation = load_item(consultations.get, consultation_id)
        if consultation is None:
            flash("상담 정보를 찾을 수 없습니다", "warning")
            return redirect(url_for("consultations"))

        values = {k: getattr(consultation, k) or "" for k in ("name", "phone", "school", "grade", "sport_interest", "preferred_date", "preferred_time", "memo")}
        values["status"] = consultation.status.value
        forms = [
            FormBlock(
                title="상담 정보 수정",
                action=url_for("consultation_update", consultation_id=consultation_id),
                fields=[*INQUIRY_FIELDS, Field("status", "상태", kind="select", options=STATUS_OPTIONS)],
                values=values,
            ),
            FormBlock(
                title="상담 진행",
                action=url_for("consultation_conduct", consultation_id=consultation_id),
                fields=[
                    Field("notes", "상담 내용", kind="textarea"),
                    Field("result", "결과", kind="select", options=CONDUCT_RESULTS),
                    Field("follow_up_date", "후속 상담일", kind="date"),
                ],
                values={"notes": consultation.notes or "", "result": "pending"},
                submit_label="상담 완료",
            ),
        ]
        actions = []
        if consultation.student_id is None:
            actions.append(Link("학생으로 전환", url_for("consultation_convert", consultation_id=consultation_id), method="post", confirm="학생으로 등록하시겠습니까?"))
            forms.append(
                FormBlock(
                    title="기존 학생과 연결",
                    action=url_for("consultation_link_student", consultation_id=consultation_id),
                    fields=[Field("student_id", "학생 번호", kind="number", required=True)],
                    submit_label="연결",
                )
            )
        else:
            actions.append(Link("학생 정보", url_for("student_detail", student_id=consultation.student_id)))
        actions.append(Link("삭제", url_for("consultation_delete", consultation_id=consultation_id), method="post", confirm="삭제하시겠습니까?"))

        return render_template(
            "page.html",
            title=f"상담 - {consultation.name}",
            pairs=[
                ("예약번호", consultation.reservation_number or "-"),
                ("상태", STATUS_OPTIONS.get(consultation.status.value, consultation.status.value)),
                ("접수일", consultation.created_at or "-"),
            ],
            actions=actions,
            forms=forms,
            back_url=url_for("consultations"),
        )

    @app.route("/consultations/<int:consultation_id>/update", methods=["POST"], endpoint="consultation_update")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_update(consultation_id: int):
        try:
            consultations.update(consultation_id, form_data())
            flash("저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "저장에 실패했습니다")
        return redirect(url_for("consultation_detail", consultation_id=consultation_id))

    @app.route("/consultations/<int:consultation_id>/conduct", methods=["POST"], endpoint="consultation_conduct")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_conduct(consultation_id: int):
        try:
            consultations.conduct(
                consultation_id,
                notes=request.form.get("notes", ""),
                result=request.form.get("result", ""),
                follow_up_date=request.form.get("follow_up_date", ""),
            )
            flash("상담이 완료 처리되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "상담 처리에 실패했습니다")
        return redirect(url_for("consultation_detail", consultation_id=consultation_id))

    @app.route("/consultations/<int:consultation_id>/convert", methods=["POST"], endpoint="consultation_convert")
    @guards.permission_required("students", "create")
    def consultation_convert(consultation_id: int):
        try:
            student_id = consultations.convert_to_student(consultation_id)
        except ApiError as e:
            flash_failure(e, "학생 전환에 실패했습니다")
            return redirect(url_for("consultation_detail", consultation_id=consultation_id))
        flash("학생으로 등록되었습니다", "success")
        if student_id:
            return redirect(url_for("student_detail", student_id=student_id))
        return redirect(url_for("consultation_detail", consultation_id=consultation_id))

    @app.route("/consultations/<int:consultation_id>/link-student", methods=["POST"], endpoint="consultation_link_student")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_link_student(consultation_id: int):
        try:
            consultations.link_student(consultation_id, request.form.get("student_id"))
            flash("학생과 연결되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "학생 연결에 실패했습니다")
        return redirect(url_for("consultation_detail", consultation_id=consultation_id))

    @app.route("/consultations/<int:consultation_id>/delete", methods=["POST"], endpoint="consultation_delete")
    @guards.feature_required("consultation", "consultations", "delete")
    def consultation_delete(consultation_id: int):
        try:
            consultations.delete(consultation_id)
            flash("삭제되었습니다", "success")
        except ApiError as e:
            flash_failure(e, "삭제에 실패했습니다")
            return redirect(url_for("consultation_detail", consultation_id=consultation_id))
        return redirect(url_for("consultations"))

    @app.route("/consultations/calendar", endpoint="consultation_calendar")
    @guards.feature_required("consultation", "consultations")
    def consultation_calendar():
        year_month = request.args.get("year_month") or current_year_month()
        rows = load_list(consultations.calendar, year_month=year_month)
        return render_template(
            "page.html",
            title="상담 캘린더",
            filters=[Field("year_month", "조회월", kind="month")],
            filter_values={"year_month": year_month},
            tables=[list_table(rows)],
            back_url=url_for("consultations"),
        )

    @app.route("/consultations/enrolled", endpoint="consultation_enrolled")
    @guards.feature_required("consultation", "consultations")
    def consultation_enrolled():
        rows = load_list(consultations.enrolled)
        return render_template(
            "page.html",
            title="상담 후 등록 학생",
            tables=[
                Table(
                    columns=[Column("name", "이름"), Column("phone", "연락처"), Column("student_name", "학생"), Column("enrolled_at", "등록일", fmt="date")],
                    rows=rows,
                    row_url=lambda r: url_for("consultation_detail", consultation_id=r.get("id")),
                )
            ],
            back_url=url_for("consultations"),
        )

    # --- booking settings ---

    @app.route("/consultations/settings", methods=["GET", "POST"], endpoint="consultation_settings")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_settings():
        if request.method == "POST":
            try:
                settings.update(
                    slug=request.form.get("slug", ""),
                    is_active=is_checked("is_active"),
                    duration_minutes=request.form.get("duration_minutes"),
                    max_per_slot=request.form.get("max_per_slot"),
                    fields={key: is_checked(f"field_{key}") for key in FIELD_TOGGLES},
                    notify_on_new=is_checked("notify_on_new"),
                    notify_email=request.form.get("notify_email", ""),
                )
                flash("설정이 저장되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "설정 저장에 실패했습니다")
            return redirect(url_for("consultation_settings"))

        current = load_item(settings.get) or ConsultationSettings()

        preview = []
        try:
            availability = settings.preview(current)
        except ValidationError as e:
            flash(str(e), "warning")
        else:
            today = today_local()
            for offset in range(PREVIEW_DAYS):
                day = today + timedelta(days=offset)
                preview.append({"date": day.isoformat(), "weekday": WEEKDAY_LABELS[WEEKDAY_KEYS[day.weekday()]], "slots": availability.generate_slots(day)})

        return render_template(
            "consultations/settings.html",
            settings=current,
            field_toggles=FIELD_TOGGLES,
            weekday_keys=WEEKDAY_KEYS,
            weekday_labels=WEEKDAY_LABELS,
            preview=preview,
            public_url=public_booking_url(container, current.slug) if current.slug else "",
        )

    @app.route("/consultations/settings/weekly-hours", methods=["POST"], endpoint="consultation_weekly_hours")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_weekly_hours():
        try:
            settings.update_weekly_hours(_weekly_hours_from_form())
            flash("상담 가능 시간이 저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "저장에 실패했습니다")
        return redirect(url_for("consultation_settings"))

    @app.route("/consultations/settings/blocked-slots", methods=["POST"], endpoint="consultation_block_add")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_block_add():
        try:
            settings.add_blocked_slot(
                date=request.form.get("date", ""),
                start_time=request.form.get("start_time", "09:00"),
                end_time=request.form.get("end_time", "18:00"),
                reason=request.form.get("reason", ""),
            )
            flash("차단일이 추가되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "차단일 추가에 실패했습니다")
        return redirect(url_for("consultation_settings"))

    @app.route("/consultations/settings/blocked-slots/<int:slot_id>/delete", methods=["POST"], endpoint="consultation_block_remove")
    @guards.feature_required("consultation", "consultations", "edit")
    def consultation_block_remove(slot_id: int):
        try:
            settings.remove_blocked_slot(slot_id)
            flash("차단일이 삭제되었습니다", "success")
        except ApiError as e:
            flash_failure(e, "삭제에 실패했습니다")
        return redirect(url_for("consultation_settings"))

    @app.route("/consultations/settings/check-slug", endpoint="consultation_check_slug")
    @guards.feature_required("consultation", "consultations")
    def consultation_check_slug():
        try:
            available = settings.is_slug_available(request.args.get("slug", ""))
        except ValidationError as e:
            return jsonify({"available": False, "message": str(e)}), 400
        except ApiError as e:
            logger.warning("slug check failed: %s", e)
            return jsonify({"available": False, "message": "확인에 실패했습니다"}), 502
        return jsonify({"available": available})

    @app.route("/consultations/settings/qr.png", endpoint="consultation_qr")
    @guards.feature_required("consultation", "consultations")
    def consultation_qr():
        current = load_item(settings.get)
        if current is None or not current.slug:
            abort(404)
        buf = qr_png(public_booking_url(container, current.slug))
        return send_file(buf, mimetype="image/png", download_name=f"consultation-{current.slug}.png")
