from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import current_year_month, today_local
from ..common.export import XLSX_MIMETYPE
from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, is_checked, load_item, load_list, run_action
from ..web.views import Column, Field, FormBlock, Grid, GridRow, Link, Table, grid_values
from .options import record_type_options, student_options
from .rankings import medal


STAT_LABELS = {
    "count": "기록 수",
    "best": "최고 기록",
    "latest": "최근 기록",
    "average": "평균",
    "improvement": "향상폭",
}

RECORD_COLUMNS = [
    Column("measured_at", "측정일", fmt="date"),
    Column("student_name", "학생"),
    Column("record_type_name", "종목"),
    Column("value", "기록"),
    Column("notes", "메모"),
]


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    records = container.training_record_service

    def training(action: str = "view"):
        return guards.feature_required("training", "training", action)

    @app.route("/training/records", methods=["GET", "POST"], endpoint="training_records")
    @training()
    def training_records():
        if request.method == "POST":
            run_action(lambda: records.create(form_data()), success="기록이 저장되었습니다", failure="기록 저장에 실패했습니다")
            return redirect(url_for("training_records"))

        student_id = request.args.get("student_id", "")
        record_type_id = request.args.get("record_type_id", "")
        year_month = request.args.get("year_month", "")
        students = student_options(container, blank="전체")
        record_types = record_type_options(container, blank="전체")
        return render_template(
            "page.html",
            title="측정 기록",
            actions=[
                Link("일괄 입력", url_for("training_records_batch")),
                Link("날짜별 보기", url_for("training_records_by_date")),
                Link("학생별 통계", url_for("training_student_stats")),
                Link("종목 관리", url_for("training_record_types")),
                Link("훈련 설정", url_for("training_settings")),
            ],
            filters=[
                Field("student_id", "학생", kind="select", options=students),
                Field("record_type_id", "종목", kind="select", options=record_types),
                Field("year_month", "월", kind="month"),
            ],
            filter_values={"student_id": student_id, "record_type_id": record_type_id, "year_month": year_month},
            tables=[
                Table(
                    columns=RECORD_COLUMNS,
                    rows=load_list(records.list, student_id=student_id, record_type_id=record_type_id, year_month=year_month),
                    row_url=lambda r: url_for("training_record_edit", record_id=r.get("id"), value=r.get("value"), notes=r.get("notes") or ""),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_record_delete", record_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[
                FormBlock(
                    title="기록 입력",
                    action=url_for("training_records"),
                    fields=[
                        Field("student_id", "학생", kind="select", options=student_options(container), required=True),
                        Field("record_type_id", "종목", kind="select", options=record_type_options(container), required=True),
                        Field("value", "기록", kind="number", required=True),
                        Field("measured_at", "측정일", kind="date", required=True),
                        Field("notes", "메모"),
                    ],
                    values={"measured_at": today_local().isoformat(), "student_id": student_id, "record_type_id": record_type_id},
                )
            ],
        )

    @app.route("/training/records/<int:record_id>", methods=["GET", "POST"], endpoint="training_record_edit")
    @training("edit")
    def training_record_edit(record_id: int):
        if request.method == "POST":
            if run_action(
                lambda: records.update(record_id, value=request.form.get("value"), notes=request.form.get("notes", "")),
                success="저장되었습니다",
                failure="기록 저장에 실패했습니다",
            ):
                return redirect(url_for("training_records"))

        return render_template(
            "page.html",
            title="기록 수정",
            forms=[
                FormBlock(
                    action=url_for("training_record_edit", record_id=record_id),
                    fields=[Field("value", "기록", kind="number", required=True), Field("notes", "메모")],
                    values={"value": request.values.get("value", ""), "notes": request.values.get("notes", "")},
                )
            ],
            back_url=url_for("training_records"),
        )

    @app.route("/training/records/<int:record_id>/delete", methods=["POST"], endpoint="training_record_delete")
    @training("delete")
    def training_record_delete(record_id: int):
        run_action(lambda: records.delete(record_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_records"))

    @app.route("/training/records/batch", methods=["GET", "POST"], endpoint="training_records_batch")
    @training("create")
    def training_records_batch():
        if request.method == "POST":
            measured_at = request.form.get("measured_at", "")
            record_type_id = request.form.get("record_type_id", "")
            try:
                count = records.save_batch(
                    measured_at=measured_at,
                    record_type_id=record_type_id,
                    values=grid_values(request.form, "value_"),
                )
                flash(f"{count}건의 기록이 저장되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "기록 저장에 실패했습니다")
            return redirect(url_for("training_records_batch", measured_at=measured_at, record_type_id=record_type_id))

        measured_at = request.args.get("measured_at") or today_local().isoformat()
        record_type_id = request.args.get("record_type_id", "")
        students = load_list(container.student_service.list, status="active")
        return render_template(
            "page.html",
            title="기록 일괄 입력",
            filters=[
                Field("measured_at", "측정일", kind="date"),
                Field("record_type_id", "종목", kind="select", options=record_type_options(container)),
            ],
            filter_values={"measured_at": measured_at, "record_type_id": record_type_id},
            grid=Grid(
                title="학생별 기록",
                action=url_for("training_records_batch"),
                rows=[GridRow(s.get("id"), s.get("name", ""), None, s.get("school") or "") for s in students],
                input_prefix="value_",
                kind="number",
                hidden={"measured_at": measured_at, "record_type_id": record_type_id},
            )
            if record_type_id
            else None,
            back_url=url_for("training_records"),
        )

    @app.route("/training/records/by-date", endpoint="training_records_by_date")
    @training()
    def training_records_by_date():
        date = request.args.get("date") or today_local().isoformat()
        return render_template(
            "page.html",
            title="날짜별 기록",
            filters=[Field("date", "날짜", kind="date")],
            filter_values={"date": date},
            tables=[Table(columns=RECORD_COLUMNS, rows=load_list(records.by_date, date))],
            back_url=url_for("training_records"),
        )

    @app.route("/training/records/student", endpoint="training_student_stats")
    @training()
    def training_student_stats():
        student_id = request.args.get("student_id", "")
        record_type_id = request.args.get("record_type_id", "")
        stats = {}
        history = []
        if student_id:
            stats = load_item(records.student_stats, student_id=student_id, record_type_id=record_type_id) or {}
            history = load_list(records.list, student_id=student_id, record_type_id=record_type_id)
        summary = {k: v for k, v in stats.items() if not isinstance(v, (list, dict))}
        return render_template(
            "page.html",
            title="학생별 기록 통계",
            filters=[
                Field("student_id", "학생", kind="select", options=student_options(container)),
                Field("record_type_id", "종목", kind="select", options=record_type_options(container, blank="전체")),
            ],
            filter_values={"student_id": student_id, "record_type_id": record_type_id},
            pairs=[(STAT_LABELS.get(k, k), v) for k, v in summary.items()],
            tables=[Table(title="기록 이력", columns=RECORD_COLUMNS, rows=history)] if student_id else [],
            back_url=url_for("training_records"),
        )

    @app.route("/training/stats", endpoint="training_stats")
    @training()
    def training_stats():
        year_month = request.args.get("year_month") or current_year_month()
        record_type_id = request.args.get("record_type_id", "")
        leaderboard = [
            {**row, "medal": medal(row.get("rank")) or ""}
            for row in load_list(records.leaderboard, record_type_id=record_type_id)
        ]
        return render_template(
            "page.html",
            title="훈련 통계",
            actions=[Link("리더보드 엑셀", url_for("training_leaderboard_export", record_type_id=record_type_id or None))],
            filters=[
                Field("year_month", "월", kind="month"),
                Field("record_type_id", "종목", kind="select", options=record_type_options(container, blank="전체")),
            ],
            filter_values={"year_month": year_month, "record_type_id": record_type_id},
            tables=[
                Table(
                    title=f"{year_month} 종목별 평균",
                    columns=[
                        Column("record_type_name", "종목"),
                        Column("average", "평균"),
                        Column("best", "최고"),
                        Column("count", "기록 수"),
                    ],
                    rows=load_list(records.averages, year_month=year_month),
                ),
                Table(
                    title="리더보드",
                    columns=[
                        Column("rank", "순위"),
                        Column("medal", "메달"),
                        Column("student_name", "이름"),
                        Column("best_value", "최고 기록"),
                    ],
                    rows=leaderboard,
                ),
            ],
        )

    @app.route("/training/stats/leaderboard.xlsx", endpoint="training_leaderboard_export")
    @training()
    def training_leaderboard_export():
        record_type_id = request.args.get("record_type_id", "")
        try:
            output = records.leaderboard_workbook(record_type_id=record_type_id)
        except (ValidationError, ApiError) as e:
            flash_failure(e, "엑셀 생성에 실패했습니다")
            return redirect(url_for("training_stats", record_type_id=record_type_id or None))
        return send_file(
            output,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"leaderboard_{today_local().isoformat()}.xlsx",
        )

    @app.route("/training/settings", methods=["GET", "POST"], endpoint="training_settings")
    @training("edit")
    def training_settings():
        settings = container.training_settings_service
        if request.method == "POST":
            if run_action(
                lambda: settings.update(form_data(), default_time_slots=request.form.getlist("default_time_slots")),
                success="훈련 설정이 저장되었습니다",
                failure="훈련 설정 저장에 실패했습니다",
            ):
                return redirect(url_for("training_settings"))

        current = load_item(settings.get) or {}
        values = {
            "default_time_slots": list(current.get("default_time_slots") or ()),
            "record_display_count": current.get("record_display_count") or "",
            "allow_self_record": bool(current.get("allow_self_record")),
            "scoreboard_enabled": bool(current.get("scoreboard_enabled")),
            "scoreboard_slug": current.get("scoreboard_slug") or "",
        }
        if request.method == "POST":
            values.update(form_data())
            values["default_time_slots"] = request.form.getlist("default_time_slots")
            values["allow_self_record"] = is_checked("allow_self_record")
            values["scoreboard_enabled"] = is_checked("scoreboard_enabled")

        slug = values["scoreboard_slug"]
        return render_template(
            "page.html",
            title="훈련 설정",
            pairs=[("공개 기록판", url_for("scoreboard", slug=slug, _external=True))] if slug else [],
            forms=[
                FormBlock(
                    action=url_for("training_settings"),
                    fields=[
                        Field("default_time_slots", "기본 시간대", kind="checkboxes", options=TIME_SLOT_OPTIONS),
                        Field("record_display_count", "기록 표시 개수", kind="number"),
                        Field("allow_self_record", "학생 직접 기록 허용", kind="checkbox"),
                        Field("scoreboard_enabled", "공개 기록판 사용", kind="checkbox"),
                        Field("scoreboard_slug", "공개 기록판 주소", placeholder="my-academy", help="영문 소문자, 숫자, '-'만 사용할 수 있습니다"),
                    ],
                    values=values,
                )
            ],
            back_url=url_for("training_records"),
        )
