from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import current_year_month, today_local
from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..instructors.service import ATTENDANCE_STATUSES as INSTRUCTOR_STATUSES
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_item, load_list
from ..web.views import Column, Field, Grid, GridRow, Link, Table, grid_values
from .service import STUDENT_ATTENDANCE_STATUSES


STUDENT_STATUS_OPTIONS = dict(zip(STUDENT_ATTENDANCE_STATUSES, ("출석", "결석", "지각", "공결")))
INSTRUCTOR_STATUS_OPTIONS = dict(zip(INSTRUCTOR_STATUSES, ("출근", "결근", "지각", "반차")))


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    schedules = container.schedule_service

    def schedule_fields():
        instructors = load_list(container.instructor_service.list)
        return [
            Field("name", "수업명", required=True),
            Field("time_slot", "시간대", kind="select", options=TIME_SLOT_OPTIONS, required=True),
            Field("instructor_id", "강사", kind="select", options={"": "미지정", **{str(i.get("id")): i.get("name", "") for i in instructors}}),
            Field("start_time", "시작 시간", kind="time"),
            Field("end_time", "종료 시간", kind="time"),
            Field("capacity", "정원", kind="number"),
            Field("memo", "메모", kind="textarea"),
        ]

    def detail_extras(schedule_id, schedule):
        date = request.args.get("date") or today_local().isoformat()
        roster = load_list(schedules.attendance, schedule_id, date=date)
        return {
            "pairs": [
                ("시간대", TIME_SLOT_OPTIONS.get(schedule.time_slot.value, "-")),
                ("강사", schedule.instructor_name or "-"),
                ("시간", f"{schedule.start_time or '-'} ~ {schedule.end_time or '-'}"),
            ],
            "filters": [Field("date", "출결 날짜", kind="date")],
            "filter_values": {"date": date},
            "grid": Grid(
                title=f"{date} 출결",
                action=url_for("schedule_mark_attendance", schedule_id=schedule_id),
                rows=[GridRow(r.get("student_id") or r.get("id"), r.get("name") or r.get("student_name") or "", r.get("status")) for r in roster],
                input_prefix="status_",
                options=STUDENT_STATUS_OPTIONS,
                hidden={"date": date},
            ),
        }

    register_crud(
        app,
        guards,
        CrudPage(
            name="schedule",
            list_endpoint="schedules",
            url="/schedules",
            permission="schedules",
            title="수업 관리",
            noun="수업",
            columns=[
                Column("name", "수업명"),
                Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                Column("instructor_name", "강사"),
                Column("start_time", "시작"),
                Column("end_time", "종료"),
                Column("capacity", "정원"),
            ],
            fields=schedule_fields,
            filters=[
                Field("year_month", "조회월", kind="month"),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            list_actions=lambda: [
                Link("월간 통계", url_for("schedule_stats")),
                Link("강사 출근", url_for("schedule_instructor_attendance")),
                Link("시간대 조회", url_for("schedule_slot")),
            ],
        ),
        CrudHandlers(
            list_rows=lambda f: schedules.list(year_month=f.get("year_month"), time_slot=f.get("time_slot")),
            get=schedules.get,
            create=schedules.create,
            update=schedules.update,
            delete=schedules.delete,
            values=lambda s: {
                "name": s.name,
                "time_slot": s.time_slot.value,
                "instructor_id": str(s.instructor_id) if s.instructor_id else "",
                "start_time": s.start_time or "",
                "end_time": s.end_time or "",
                "capacity": s.capacity or "",
                "memo": s.memo or "",
            },
            item_title=lambda s: f"수업 - {s.name}",
            detail_extras=detail_extras,
        ),
    )

    @app.route("/schedules/<int:schedule_id>/attendance", methods=["POST"], endpoint="schedule_mark_attendance")
    @guards.permission_required("attendance", "edit")
    def schedule_mark_attendance(schedule_id: int):
        date = request.form.get("date", "")
        try:
            schedules.mark_attendance(schedule_id, date=date, statuses=grid_values(request.form, "status_"))
            flash("출결이 저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "출결 저장에 실패했습니다")
        return redirect(url_for("schedule_detail", schedule_id=schedule_id, date=date))

    @app.route("/schedules/stats", endpoint="schedule_stats")
    @guards.permission_required("schedules")
    def schedule_stats():
        year_month = request.args.get("year_month") or current_year_month()
        stats = load_item(schedules.stats, year_month=year_month) or {}
        instructor_rows = load_list(schedules.instructor_month, year_month=year_month)
        return render_template(
            "page.html",
            title="수업 통계",
            filters=[Field("year_month", "조회월", kind="month")],
            filter_values={"year_month": year_month},
            pairs=[(str(k), v) for k, v in stats.items()],
            tables=[
                Table(
                    title="강사별 월간 수업",
                    columns=[Column("instructor_name", "강사"), Column("date", "날짜", fmt="date"), Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS), Column("schedule_name", "수업")],
                    rows=instructor_rows,
                )
            ],
            back_url=url_for("schedules"),
        )

    @app.route("/schedules/slot", endpoint="schedule_slot")
    @guards.permission_required("schedules")
    def schedule_slot():
        date = request.args.get("date") or today_local().isoformat()
        instructor_id = request.args.get("instructor_id", "")
        rows = load_list(schedules.slot, date=date, instructor_id=int(instructor_id) if instructor_id.isdigit() else None)
        return render_template(
            "page.html",
            title="시간대별 수업",
            filters=[Field("date", "날짜", kind="date"), Field("instructor_id", "강사 번호", kind="number")],
            filter_values={"date": date, "instructor_id": instructor_id},
            tables=[
                Table(
                    columns=[Column("name", "수업명"), Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS), Column("instructor_name", "강사"), Column("student_count", "인원")],
                    rows=rows,
                    row_url=lambda r: url_for("schedule_detail", schedule_id=r.get("id")),
                )
            ],
            back_url=url_for("schedules"),
        )

    @app.route("/schedules/instructor-attendance", methods=["GET", "POST"], endpoint="schedule_instructor_attendance")
    @guards.permission_required("schedules")
    def schedule_instructor_attendance():
        date = request.values.get("date") or today_local().isoformat()
        if request.method == "POST":
            statuses = grid_values(request.form, "status_")
            records = [{"instructor_id": instructor_id, "status": status} for instructor_id, status in statuses.items()]
            try:
                if not records:
                    raise ValidationError("출근을 기록할 강사가 없습니다")
                schedules.mark_instructor_attendance(date, records)
                flash("강사 출근이 저장되었습니다", "success")
            except (ValidationError, ApiError) as e:
                flash_failure(e, "저장에 실패했습니다")
            return redirect(url_for("schedule_instructor_attendance", date=date))

        rows = load_list(schedules.instructor_attendance, date)
        return render_template(
            "page.html",
            title="강사 출근",
            filters=[Field("date", "날짜", kind="date")],
            filter_values={"date": date},
            grid=Grid(
                title=f"{date} 강사 출근",
                action=url_for("schedule_instructor_attendance"),
                rows=[GridRow(r.get("instructor_id") or r.get("id"), r.get("instructor_name") or r.get("name") or "", r.get("status"), TIME_SLOT_OPTIONS.get(r.get("time_slot"), "")) for r in rows],
                input_prefix="status_",
                options=INSTRUCTOR_STATUS_OPTIONS,
                hidden={"date": date},
            ),
            back_url=url_for("schedules"),
        )
