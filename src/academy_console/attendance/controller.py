from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_item, load_list, safe_path
from ..web.views import Column, Field, Grid, GridRow, Link, Table, grid_values
from .service import STATUS_LABELS


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    attendance = container.attendance_service

    @app.route("/attendance", endpoint="attendance")
    @guards.permission_required("attendance")
    def attendance_daily():
        date = request.args.get("date") or today_local().isoformat()
        time_slot = request.args.get("time_slot", "")
        rows = load_list(attendance.daily, date=date, time_slot=time_slot)
        summary = load_item(attendance.summary, date=date) or {}
        return render_template(
            "page.html",
            title="출결 관리",
            actions=[Link("월간 출결", url_for("attendance_monthly")), Link("출결 기록 조회", url_for("attendance_records"))],
            filters=[
                Field("date", "날짜", kind="date"),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            filter_values={"date": date, "time_slot": time_slot},
            pairs=[(STATUS_LABELS.get(k, k), v) for k, v in summary.items()],
            grid=Grid(
                title=f"{date} 출결",
                action=url_for("attendance_mark_batch"),
                rows=[
                    GridRow(r.get("student_id") or r.get("id"), r.get("name") or r.get("student_name") or "", r.get("status"), TIME_SLOT_OPTIONS.get(r.get("time_slot"), ""))
                    for r in rows
                ],
                input_prefix="status_",
                options=STATUS_LABELS,
                hidden={"date": date, "time_slot": time_slot},
            ),
        )

    @app.route("/attendance/batch", methods=["POST"], endpoint="attendance_mark_batch")
    @guards.permission_required("attendance", "edit")
    def attendance_mark_batch():
        date = request.form.get("date", "")
        time_slot = request.form.get("time_slot", "")
        try:
            count = attendance.mark_batch(date=date, statuses=grid_values(request.form, "status_"), time_slot=time_slot)
            flash(f"{count}명의 출결이 저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "출결 저장에 실패했습니다")
        return redirect(url_for("attendance", date=date, time_slot=time_slot))

    @app.route("/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @guards.permission_required("attendance", "edit")
    def attendance_mark():
        try:
            attendance.mark(
                student_id=int(request.form.get("student_id", "0") or 0),
                date=request.form.get("date", ""),
                status=request.form.get("status", ""),
                time_slot=request.form.get("time_slot"),
                memo=request.form.get("memo", ""),
            )
            flash("출결이 저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "출결 저장에 실패했습니다")
        return redirect(safe_path(request.form.get("next"), url_for("attendance")))

    @app.route("/attendance/records", endpoint="attendance_records")
    @guards.permission_required("attendance")
    def attendance_records():
        date = request.args.get("date", "")
        time_slot = request.args.get("time_slot", "")
        rows = load_list(attendance.list, date=date, time_slot=time_slot)
        return render_template(
            "page.html",
            title="출결 기록",
            filters=[
                Field("date", "날짜", kind="date"),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            filter_values={"date": date, "time_slot": time_slot},
            tables=[
                Table(
                    columns=[
                        Column("date", "날짜", fmt="date"),
                        Column("student_name", "학생"),
                        Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                        Column("status", "상태", labels=STATUS_LABELS),
                        Column("memo", "메모"),
                    ],
                    rows=rows,
                )
            ],
            back_url=url_for("attendance"),
        )

    @app.route("/attendance/monthly", endpoint="attendance_monthly")
    @guards.permission_required("attendance")
    def attendance_monthly():
        today = today_local()
        year = request.args.get("year") or str(today.year)
        month = request.args.get("month") or str(today.month)
        rows = load_list(attendance.monthly, year=year, month=month)
        summary = load_item(attendance.monthly_summary, year=year, month=month) or {}
        return render_template(
            "page.html",
            title="월간 출결",
            filters=[Field("year", "연도", kind="number"), Field("month", "월", kind="number")],
            filter_values={"year": year, "month": month},
            pairs=[(STATUS_LABELS.get(k, k), v) for k, v in summary.items()],
            tables=[
                Table(
                    columns=[
                        Column("student_name", "학생"),
                        Column("present", "출석"),
                        Column("absent", "결석"),
                        Column("late", "지각"),
                        Column("excused", "공결"),
                        Column("rate", "출석률"),
                    ],
                    rows=rows,
                )
            ],
            back_url=url_for("attendance"),
        )
