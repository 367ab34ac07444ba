from __future__ import annotations

from flask import Flask, render_template, request, url_for

from ..attendance.service import STATUS_LABELS as ATTENDANCE_LABELS
from ..common.datetime_utils import current_year_month
from ..container import Container
from ..core.enums import STUDENT_STATUS_LABELS, TIME_SLOT_OPTIONS
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import load_list
from ..web.views import Column, Field, Link, Table

STATUS_OPTIONS = {s.value: label for s, label in STUDENT_STATUS_LABELS.items()}

STUDENT_FIELDS = [
    Field("name", "이름", required=True),
    Field("phone", "연락처", kind="tel"),
    Field("parent_phone", "학부모 연락처", kind="tel"),
    Field("school", "학교"),
    Field("grade", "학년"),
    Field("time_slot", "시간대", kind="select", options={"": "선택", **TIME_SLOT_OPTIONS}),
    Field("memo", "메모", kind="textarea"),
]


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    students = container.student_service

    def detail_extras(student_id, student):
        year_month = request.args.get("year_month") or current_year_month()
        history = load_list(container.attendance_service.by_student, student_id, year_month=year_month)
        return {
            "pairs": [("상태", STATUS_OPTIONS.get(student.status.value, student.status.value)), ("등록일", student.created_at or "-")],
            "filters": [Field("year_month", "출결 조회월", kind="month")],
            "filter_values": {"year_month": year_month},
            "tables": [
                Table(
                    title="출결 기록",
                    columns=[Column("date", "날짜", fmt="date"), Column("status", "상태", labels=ATTENDANCE_LABELS), Column("memo", "메모")],
                    rows=history,
                )
            ],
            "actions": [Link("수납 내역", url_for("payments", student_id=student_id))],
        }

    register_crud(
        app,
        guards,
        CrudPage(
            name="student",
            list_endpoint="students",
            url="/students",
            permission="students",
            title="학생 관리",
            noun="학생",
            columns=[
                Column("name", "이름"),
                Column("phone", "연락처"),
                Column("school", "학교"),
                Column("grade", "학년"),
                Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                Column("status", "상태", labels=STATUS_OPTIONS),
            ],
            fields=STUDENT_FIELDS,
            edit_fields=[*STUDENT_FIELDS, Field("status", "상태", kind="select", options=STATUS_OPTIONS)],
            filters=[
                Field("search", "검색", placeholder="이름 또는 연락처"),
                Field("status", "상태", kind="select", options={"": "전체", **STATUS_OPTIONS}),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            list_actions=lambda: [Link("수업 요일", url_for("student_class_days"))],
        ),
        CrudHandlers(
            list_rows=lambda f: students.list(search=f.get("search"), status=f.get("status"), time_slot=f.get("time_slot")),
            get=students.get,
            create=students.create,
            update=students.update,
            delete=students.delete,
            values=lambda s: {
                "name": s.name,
                "phone": s.phone or "",
                "parent_phone": s.parent_phone or "",
                "school": s.school or "",
                "grade": s.grade or "",
                "time_slot": s.time_slot.value if s.time_slot else "",
                "memo": s.memo or "",
                "status": s.status.value,
            },
            item_title=lambda s: f"학생 - {s.name}",
            detail_extras=detail_extras,
        ),
    )

    @app.route("/students/class-days", endpoint="student_class_days")
    @guards.permission_required("students")
    def student_class_days():
        time_slot = request.args.get("time_slot", "")
        rows = load_list(students.class_days, time_slot=time_slot)
        return render_template(
            "page.html",
            title="수업 요일",
            filters=[Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS})],
            filter_values={"time_slot": time_slot},
            tables=[
                Table(
                    columns=[Column("name", "이름"), Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS), Column("class_days", "수업 요일")],
                    rows=rows,
                    row_url=lambda r: url_for("student_detail", student_id=r.get("id")),
                )
            ],
            back_url=url_for("students"),
        )
