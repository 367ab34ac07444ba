from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import current_year_month, today_local
from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_list
from ..web.views import Column, Field, FormBlock, Link, Table


ATTENDANCE_LABELS = {"present": "출근", "absent": "결근", "late": "지각", "half_day": "반차"}
OVERTIME_STATUS_LABELS = {"pending": "대기", "approved": "승인", "rejected": "반려"}

INSTRUCTOR_FIELDS = [
    Field("name", "이름", required=True),
    Field("phone", "연락처", kind="tel"),
    Field("email", "이메일", kind="email"),
    Field("specialty", "전문 종목"),
    Field("experience", "경력"),
    Field("memo", "메모", kind="textarea"),
]


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    instructors = container.instructor_service

    def detail_extras(instructor_id, instructor):
        year_month = request.args.get("year_month") or current_year_month()
        attendance = load_list(instructors.monthly_attendance, instructor_id, year_month=year_month)
        overtime = load_list(instructors.overtime, instructor_id, year_month=year_month)
        return {
            "filters": [Field("year_month", "조회월", kind="month")],
            "filter_values": {"year_month": year_month},
            "tables": [
                Table(
                    title="월간 출근",
                    columns=[Column("date", "날짜", fmt="date"), Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS), Column("status", "상태", labels=ATTENDANCE_LABELS)],
                    rows=attendance,
                ),
                Table(
                    title="초과 근무",
                    columns=[
                        Column("date", "날짜", fmt="date"),
                        Column("start_time", "시작"),
                        Column("end_time", "종료"),
                        Column("reason", "사유"),
                        Column("status", "상태", labels=OVERTIME_STATUS_LABELS),
                    ],
                    rows=overtime,
                ),
            ],
            "forms": [
                FormBlock(
                    title="출근 기록",
                    action=url_for("instructor_mark_attendance", instructor_id=instructor_id),
                    fields=[
                        Field("date", "날짜", kind="date", required=True),
                        Field("time_slot", "시간대", kind="select", options={"": "선택", **TIME_SLOT_OPTIONS}),
                        Field("status", "상태", kind="select", options=ATTENDANCE_LABELS),
                    ],
                    values={"date": today_local().isoformat(), "status": "present"},
                ),
                FormBlock(
                    title="초과 근무 신청",
                    action=url_for("instructor_request_overtime", instructor_id=instructor_id),
                    fields=[
                        Field("date", "날짜", kind="date", required=True),
                        Field("start_time", "시작", kind="time", required=True),
                        Field("end_time", "종료", kind="time", required=True),
                        Field("reason", "사유"),
                    ],
                    submit_label="신청",
                ),
            ],
        }

    register_crud(
        app,
        guards,
        CrudPage(
            name="instructor",
            list_endpoint="instructors",
            url="/instructors",
            permission="instructors",
            title="강사 관리",
            noun="강사",
            columns=[Column("name", "이름"), Column("phone", "연락처"), Column("email", "이메일"), Column("specialty", "전문 종목")],
            fields=INSTRUCTOR_FIELDS,
            filters=[Field("search", "검색", placeholder="이름")],
            list_actions=lambda: [
                Link("가용 강사", url_for("instructor_available")),
                Link("초과근무 승인", url_for("instructor_pending_overtimes")),
            ],
        ),
        CrudHandlers(
            list_rows=lambda f: instructors.list(search=f.get("search")),
            get=instructors.get,
            create=instructors.create,
            update=instructors.update,
            delete=instructors.delete,
            values=lambda i: {k: getattr(i, k) or "" for k in ("name", "phone", "email", "specialty", "experience", "memo")},
            item_title=lambda i: f"강사 - {i.name}",
            detail_extras=detail_extras,
        ),
    )

    @app.route("/instructors/<int:instructor_id>/attendance", methods=["POST"], endpoint="instructor_mark_attendance")
    @guards.permission_required("instructors", "edit")
    def instructor_mark_attendance(instructor_id: int):
        try:
            instructors.mark_attendance(
                instructor_id,
                date=request.form.get("date", ""),
                status=request.form.get("status", ""),
                time_slot=request.form.get("time_slot"),
            )
            flash("출근이 기록되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "출근 기록에 실패했습니다")
        return redirect(url_for("instructor_detail", instructor_id=instructor_id))

    @app.route("/instructors/<int:instructor_id>/overtime", methods=["POST"], endpoint="instructor_request_overtime")
    @guards.permission_required("instructors")
    def instructor_request_overtime(instructor_id: int):
        try:
            instructors.request_overtime(
                instructor_id,
                date=request.form.get("date", ""),
                start_time=request.form.get("start_time", ""),
                end_time=request.form.get("end_time", ""),
                reason=request.form.get("reason", ""),
            )
            flash("초과 근무가 신청되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "신청에 실패했습니다")
        return redirect(url_for("instructor_detail", instructor_id=instructor_id))

    @app.route("/instructors/available", endpoint="instructor_available")
    @guards.permission_required("instructors")
    def instructor_available():
        date = request.args.get("date") or today_local().isoformat()
        time_slot = request.args.get("time_slot") or "afternoon"
        rows = load_list(instructors.available, date=date, time_slot=time_slot)
        return render_template(
            "page.html",
            title="가용 강사",
            filters=[Field("date", "날짜", kind="date"), Field("time_slot", "시간대", kind="select", options=TIME_SLOT_OPTIONS)],
            filter_values={"date": date, "time_slot": time_slot},
            tables=[
                Table(
                    columns=[Column("name", "이름"), Column("phone", "연락처"), Column("specialty", "전문 종목")],
                    rows=rows,
                    row_url=lambda r: url_for("instructor_detail", instructor_id=r.get("id")),
                )
            ],
            back_url=url_for("instructors"),
        )

    @app.route("/instructors/overtimes/pending", endpoint="instructor_pending_overtimes")
    @guards.permission_required("instructors", "edit")
    def instructor_pending_overtimes():
        rows = load_list(instructors.pending_overtimes)
        return render_template(
            "page.html",
            title="초과근무 승인 대기",
            tables=[
                Table(
                    columns=[
                        Column("instructor_name", "강사"),
                        Column("date", "날짜", fmt="date"),
                        Column("start_time", "시작"),
                        Column("end_time", "종료"),
                        Column("reason", "사유"),
                    ],
                    rows=rows,
                    row_actions=lambda r: [
                        Link("승인", url_for("instructor_decide_overtime", overtime_id=r.get("id"), decision="approve"), method="post"),
                        Link("반려", url_for("instructor_decide_overtime", overtime_id=r.get("id"), decision="reject"), method="post", confirm="반려하시겠습니까?"),
                    ],
                )
            ],
            back_url=url_for("instructors"),
        )

    @app.route("/instructors/overtimes/<int:overtime_id>/<decision>", methods=["POST"], endpoint="instructor_decide_overtime")
    @guards.permission_required("instructors", "edit")
    def instructor_decide_overtime(overtime_id: int, decision: str):
        try:
            instructors.decide_overtime(overtime_id, approved=decision == "approve", memo=request.form.get("memo", ""))
            flash("처리되었습니다", "success")
        except ApiError as e:
            flash_failure(e, "처리에 실패했습니다")
        return redirect(url_for("instructor_pending_overtimes"))
