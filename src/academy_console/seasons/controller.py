from __future__ import annotations

from flask import Flask, flash, redirect, request, url_for

from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_list
from ..web.views import Column, Field, FormBlock

SEASON_FIELDS = [
    Field("name", "시즌명", required=True),
    Field("start_date", "시작일", kind="date", required=True),
    Field("end_date", "종료일", kind="date", required=True),
    Field("description", "설명", kind="textarea"),
]


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    seasons = container.season_service

    def detail_extras(season_id, season):
        students = load_list(container.student_service.list, status="active")
        return {
            "pairs": [("기간", f"{season.start_date} ~ {season.end_date}"), ("등록 학생", f"{season.student_count}명")],
            "forms": [
                FormBlock(
                    title="학생 등록",
                    action=url_for("season_enroll", season_id=season_id),
                    fields=[
                        Field(
                            "student_ids",
                            "재원생",
                            kind="checkboxes",
                            options={str(s.get("id")): s.get("name", "") for s in students},
                        )
                    ],
                    submit_label="등록",
                )
            ],
        }

    register_crud(
        app,
        guards,
        CrudPage(
            name="season",
            list_endpoint="seasons",
            url="/seasons",
            permission="seasons",
            title="시즌 관리",
            noun="시즌",
            columns=[
                Column("name", "시즌명"),
                Column("start_date", "시작일", fmt="date"),
                Column("end_date", "종료일", fmt="date"),
                Column("student_count", "등록 학생"),
            ],
            fields=SEASON_FIELDS,
        ),
        CrudHandlers(
            list_rows=lambda f: seasons.list(),
            get=seasons.get,
            create=seasons.create,
            update=seasons.update,
            delete=seasons.delete,
            values=lambda s: {"name": s.name, "start_date": s.start_date, "end_date": s.end_date, "description": s.description or ""},
            item_title=lambda s: f"시즌 - {s.name}",
            detail_extras=detail_extras,
        ),
    )

    @app.route("/seasons/<int:season_id>/enroll", methods=["POST"], endpoint="season_enroll")
    @guards.permission_required("seasons", "edit")
    def season_enroll(season_id: int):
        try:
            count = seasons.enroll(season_id, request.form.getlist("student_ids"))
            flash(f"{count}명이 등록되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "학생 등록에 실패했습니다")
        return redirect(url_for("season_detail", season_id=season_id))
