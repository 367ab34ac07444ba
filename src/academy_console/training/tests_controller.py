from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import current_year_month, today_local
from ..common.export import XLSX_MIMETYPE
from ..container import Container
from ..core.enums import TEST_STATUS_LABELS, MonthlyTestStatus
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, load_item, load_list, run_action
from ..web.views import Column, Field, FormBlock, Grid, GridRow, Link, Table, grid_values
from .options import record_type_options, student_options
from .rankings import flatten_ranking, medal, ranking_columns

STATUS_OPTIONS = {s.value: label for s, label in TEST_STATUS_LABELS.items()}


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    tests = container.monthly_test_service

    def training(action: str = "view"):
        return guards.feature_required("training", "training", action)

    def test_fields():
        return [
            Field("name", "테스트명", required=True),
            Field("year_month", "테스트 월", kind="month", required=True),
            Field("status", "상태", kind="select", options=STATUS_OPTIONS),
            Field("description", "설명", kind="textarea"),
            Field("record_type_ids", "측정 종목", kind="checkboxes", options={k: v for k, v in record_type_options(container).items() if k}),
        ]

    def to_test(test_id: int):
        return redirect(url_for("training_test_detail", test_id=test_id))

    def to_session(test_id: int, session_id: int, **params):
        return redirect(url_for("training_test_session", test_id=test_id, session_id=session_id, **params))

    @app.route("/training/tests", methods=["GET", "POST"], endpoint="training_tests")
    @training()
    def training_tests():
        if request.method == "POST":
            run_action(
                lambda: tests.create(form_data(), record_type_ids=request.form.getlist("record_type_ids")),
                success="월간 테스트가 추가되었습니다",
                failure="테스트 저장에 실패했습니다",
            )
            return redirect(url_for("training_tests"))

        year_month = request.args.get("year_month", "")
        status = request.args.get("status", "")
        return render_template(
            "page.html",
            title="월간 테스트",
            filters=[
                Field("year_month", "월", kind="month"),
                Field("status", "상태", kind="select", options={"": "전체", **STATUS_OPTIONS}),
            ],
            filter_values={"year_month": year_month, "status": status},
            tables=[
                Table(
                    columns=[
                        Column("year_month", "월"),
                        Column("name", "테스트명"),
                        Column("status", "상태", labels=STATUS_OPTIONS),
                        Column("participant_count", "참가자"),
                    ],
                    rows=load_list(tests.list, year_month=year_month, status=status),
                    row_url=lambda r: url_for("training_test_detail", test_id=r.get("id")),
                )
            ],
            forms=[
                FormBlock(
                    title="테스트 추가",
                    action=url_for("training_tests"),
                    fields=test_fields(),
                    values={"year_month": current_year_month(), "status": MonthlyTestStatus.DRAFT.value},
                    submit_label="추가",
                )
            ],
        )

    @app.route("/training/tests/<int:test_id>/update", methods=["POST"], endpoint="training_test_update")
    @training("edit")
    def training_test_update(test_id: int):
        run_action(
            lambda: tests.update(test_id, form_data(), record_type_ids=request.form.getlist("record_type_ids")),
            success="저장되었습니다",
            failure="테스트 저장에 실패했습니다",
        )
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>", endpoint="training_test_detail")
    @training()
    def training_test_detail(test_id: int):
        test = load_item(tests.get, test_id)
        if test is None:
            flash("테스트를 찾을 수 없습니다", "warning")
            return redirect(url_for("training_tests"))

        participants = load_list(tests.participants, test_id)
        groups = load_list(tests.groups, test_id)
        students = {k: v for k, v in student_options(container).items() if k}
        return render_template(
            "page.html",
            title=f"월간 테스트 - {test.name}",
            actions=[
                Link("순위", url_for("training_test_rankings", test_id=test_id)),
                Link("삭제", url_for("training_test_delete", test_id=test_id), method="post", confirm="테스트를 삭제하시겠습니까?"),
            ],
            pairs=[("월", test.year_month), ("상태", TEST_STATUS_LABELS.get(test.status, test.status))],
            tables=[
                Table(
                    title="세션",
                    columns=[Column("date", "날짜", fmt="date"), Column("start_time", "시작"), Column("end_time", "종료")],
                    rows=[
                        {"id": s.session_id, "date": s.date, "start_time": s.start_time, "end_time": s.end_time}
                        for s in load_list(tests.sessions, test_id)
                    ],
                    row_url=lambda r: url_for("training_test_session", test_id=test_id, session_id=r["id"]),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_test_session_delete", test_id=test_id, session_id=r["id"]), method="post", confirm="세션을 삭제하시겠습니까?")
                    ],
                ),
                Table(
                    title="참가자",
                    columns=[Column("student_name", "이름"), Column("group_name", "조")],
                    rows=participants,
                    row_actions=lambda r: [
                        Link("제외", url_for("training_test_participant_remove", test_id=test_id, participant_id=r.get("id")), method="post", confirm="참가자를 제외하시겠습니까?")
                    ],
                ),
                Table(
                    title="조",
                    columns=[Column("name", "조 이름"), Column("student_names", "학생")],
                    rows=groups,
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_test_group_delete", test_id=test_id, group_id=r.get("id")), method="post", confirm="조를 삭제하시겠습니까?")
                    ],
                ),
            ],
            forms=[
                FormBlock(
                    title="테스트 정보",
                    action=url_for("training_test_update", test_id=test_id),
                    fields=test_fields(),
                    values={
                        "name": test.name,
                        "year_month": test.year_month,
                        "status": test.status.value,
                        "description": test.description or "",
                    },
                ),
                FormBlock(
                    title="세션 추가",
                    action=url_for("training_test_session_create", test_id=test_id),
                    fields=[
                        Field("date", "날짜", kind="date", required=True),
                        Field("name", "세션명"),
                        Field("record_type_ids", "측정 종목", kind="checkboxes", options={k: v for k, v in record_type_options(container).items() if k}),
                    ],
                    values={"date": today_local().isoformat()},
                    submit_label="추가",
                ),
                FormBlock(
                    title="참가자 추가",
                    action=url_for("training_test_participants_add", test_id=test_id),
                    fields=[Field("student_ids", "학생", kind="checkboxes", options=students)],
                    submit_label="추가",
                ),
                FormBlock(
                    title="조 추가 / 수정",
                    action=url_for("training_test_group_save", test_id=test_id),
                    fields=[
                        Field("group_id", "수정할 조", kind="select", options={"": "새 조", **{str(g.get("id")): g.get("name", "") for g in groups}}),
                        Field("name", "조 이름", required=True),
                        Field("student_ids", "학생", kind="checkboxes", options={str(p.get("student_id")): p.get("student_name", "") for p in participants}),
                    ],
                ),
            ],
            back_url=url_for("training_tests"),
        )

    @app.route("/training/tests/<int:test_id>/delete", methods=["POST"], endpoint="training_test_delete")
    @training("delete")
    def training_test_delete(test_id: int):
        if run_action(lambda: tests.delete(test_id), success="삭제되었습니다", failure="삭제에 실패했습니다"):
            return redirect(url_for("training_tests"))
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>/participants", methods=["POST"], endpoint="training_test_participants_add")
    @training("edit")
    def training_test_participants_add(test_id: int):
        try:
            count = tests.add_participants(test_id, request.form.getlist("student_ids"))
            flash(f"{count}명이 추가되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "참가자 추가에 실패했습니다")
        return to_test(test_id)

    @app.route(
        "/training/tests/<int:test_id>/participants/<int:participant_id>/delete",
        methods=["POST"],
        endpoint="training_test_participant_remove",
    )
    @training("edit")
    def training_test_participant_remove(test_id: int, participant_id: int):
        run_action(lambda: tests.remove_participant(test_id, participant_id), success="제외되었습니다", failure="참가자 제외에 실패했습니다")
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>/groups", methods=["POST"], endpoint="training_test_group_save")
    @training("edit")
    def training_test_group_save(test_id: int):
        group_id = request.form.get("group_id", "")
        name = request.form.get("name", "")
        student_ids = request.form.getlist("student_ids")
        if group_id.isdigit():
            run_action(lambda: tests.update_group(test_id, int(group_id), name=name, student_ids=student_ids), success="조가 저장되었습니다", failure="조 저장에 실패했습니다")
        else:
            run_action(lambda: tests.create_group(test_id, name=name, student_ids=student_ids), success="조가 추가되었습니다", failure="조 저장에 실패했습니다")
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>/groups/<int:group_id>/delete", methods=["POST"], endpoint="training_test_group_delete")
    @training("edit")
    def training_test_group_delete(test_id: int, group_id: int):
        run_action(lambda: tests.delete_group(test_id, group_id), success="조가 삭제되었습니다", failure="삭제에 실패했습니다")
        return to_test(test_id)

    # --- sessions ---

    @app.route("/training/tests/<int:test_id>/sessions", methods=["POST"], endpoint="training_test_session_create")
    @training("edit")
    def training_test_session_create(test_id: int):
        run_action(
            lambda: tests.create_session(
                test_id,
                date=request.form.get("date", ""),
                name=request.form.get("name", ""),
                record_type_ids=request.form.getlist("record_type_ids"),
            ),
            success="세션이 추가되었습니다",
            failure="세션 추가에 실패했습니다",
        )
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>/sessions/<int:session_id>/delete", methods=["POST"], endpoint="training_test_session_delete")
    @training("delete")
    def training_test_session_delete(test_id: int, session_id: int):
        run_action(lambda: tests.delete_session(session_id), success="세션이 삭제되었습니다", failure="삭제에 실패했습니다")
        return to_test(test_id)

    @app.route("/training/tests/<int:test_id>/sessions/<int:session_id>", endpoint="training_test_session")
    @training()
    def training_test_session(test_id: int, session_id: int):
        session = load_item(tests.get_session, test_id, session_id)
        if session is None:
            flash("세션을 찾을 수 없습니다", "warning")
            return to_test(test_id)

        record_type_id = request.args.get("record_type_id", "")
        groups = load_list(tests.groups, test_id)
        session_groups = load_list(tests.session_groups, session_id)
        participants = load_list(tests.session_participants, session_id)
        test_participants = load_list(tests.participants, test_id)
        records = load_list(tests.session_records, session_id, record_type_id=record_type_id)
        recorded = {str(r.get("student_id")): r.get("value") for r in records}
        return render_template(
            "page.html",
            title=f"테스트 세션 - {session.date}",
            filters=[Field("record_type_id", "종목", kind="select", options=record_type_options(container, blank="전체"))],
            filter_values={"record_type_id": record_type_id},
            tables=[
                Table(
                    title="기록",
                    columns=[
                        Column("student_name", "학생"),
                        Column("record_type_name", "종목"),
                        Column("value", "기록"),
                        Column("score", "점수"),
                        Column("notes", "메모"),
                    ],
                    rows=records,
                    row_actions=lambda r: [
                        Link(
                            "삭제",
                            url_for("training_test_record_delete", test_id=test_id, session_id=session_id, record_id=r.get("id")),
                            method="post",
                            confirm="기록을 삭제하시겠습니까?",
                        )
                    ],
                ),
                Table(title="세션 참가자", columns=[Column("student_name", "이름"), Column("group_name", "조")], rows=participants),
            ],
            grid=Grid(
                title="종목 기록 입력",
                action=url_for("training_test_records_save", test_id=test_id, session_id=session_id),
                rows=[
                    GridRow(p.get("student_id"), p.get("student_name", ""), recorded.get(str(p.get("student_id"))), p.get("group_name") or "")
                    for p in participants
                ],
                input_prefix="value_",
                kind="number",
                hidden={"record_type_id": record_type_id},
            )
            if record_type_id
            else None,
            forms=[
                FormBlock(
                    title="조 배정",
                    action=url_for("training_test_session_groups", test_id=test_id, session_id=session_id),
                    fields=[Field("group_ids", "조", kind="checkboxes", options={str(g.get("id")): g.get("name", "") for g in groups})],
                    values={"group_ids": [str(g.get("group_id") or g.get("id")) for g in session_groups]},
                ),
                FormBlock(
                    title="참가자 동기화",
                    action=url_for("training_test_session_participants", test_id=test_id, session_id=session_id),
                    fields=[
                        Field(
                            "student_ids",
                            "학생",
                            kind="checkboxes",
                            options={str(p.get("student_id")): p.get("student_name", "") for p in test_participants},
                        )
                    ],
                    values={"student_ids": [str(p.get("student_id")) for p in participants]},
                ),
                FormBlock(
                    title="기록 수정",
                    action=url_for("training_test_record_update", test_id=test_id, session_id=session_id),
                    fields=[
                        Field("record_id", "기록", kind="select", options={"": "선택", **{str(r.get("id")): f"{r.get('student_name', '')} {r.get('record_type_name') or ''} {r.get('value')}" for r in records}}, required=True),
                        Field("value", "기록", kind="number", required=True),
                        Field("notes", "메모"),
                    ],
                    submit_label="수정",
                ),
            ],
            back_url=url_for("training_test_detail", test_id=test_id),
        )

    @app.route("/training/tests/<int:test_id>/sessions/<int:session_id>/groups", methods=["POST"], endpoint="training_test_session_groups")
    @training("edit")
    def training_test_session_groups(test_id: int, session_id: int):
        run_action(lambda: tests.assign_session_groups(session_id, request.form.getlist("group_ids")), success="조가 배정되었습니다", failure="조 배정에 실패했습니다")
        return to_session(test_id, session_id)

    @app.route(
        "/training/tests/<int:test_id>/sessions/<int:session_id>/participants",
        methods=["POST"],
        endpoint="training_test_session_participants",
    )
    @training("edit")
    def training_test_session_participants(test_id: int, session_id: int):
        run_action(
            lambda: tests.sync_session_participants(session_id, request.form.getlist("student_ids")),
            success="참가자가 동기화되었습니다",
            failure="참가자 동기화에 실패했습니다",
        )
        return to_session(test_id, session_id)

    @app.route("/training/tests/<int:test_id>/sessions/<int:session_id>/records", methods=["POST"], endpoint="training_test_records_save")
    @training("edit")
    def training_test_records_save(test_id: int, session_id: int):
        record_type_id = request.form.get("record_type_id", "")
        try:
            count = tests.save_session_records(session_id, record_type_id=record_type_id, values=grid_values(request.form, "value_"))
            flash(f"{count}건의 기록이 저장되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "기록 저장에 실패했습니다")
        return to_session(test_id, session_id, record_type_id=record_type_id or None)

    @app.route(
        "/training/tests/<int:test_id>/sessions/<int:session_id>/records/update",
        methods=["POST"],
        endpoint="training_test_record_update",
    )
    @training("edit")
    def training_test_record_update(test_id: int, session_id: int):
        record_id = request.form.get("record_id", "")
        if not record_id.isdigit():
            flash("수정할 기록을 선택하세요", "danger")
            return to_session(test_id, session_id)
        run_action(
            lambda: tests.update_session_record(session_id, int(record_id), value=request.form.get("value"), notes=request.form.get("notes", "")),
            success="기록이 수정되었습니다",
            failure="기록 수정에 실패했습니다",
        )
        return to_session(test_id, session_id)

    @app.route(
        "/training/tests/<int:test_id>/sessions/<int:session_id>/records/<int:record_id>/delete",
        methods=["POST"],
        endpoint="training_test_record_delete",
    )
    @training("edit")
    def training_test_record_delete(test_id: int, session_id: int, record_id: int):
        run_action(lambda: tests.delete_session_record(session_id, record_id), success="기록이 삭제되었습니다", failure="삭제에 실패했습니다")
        return to_session(test_id, session_id)

    # --- rankings ---

    @app.route("/training/tests/<int:test_id>/rankings", endpoint="training_test_rankings")
    @training()
    def training_test_rankings(test_id: int):
        test = load_item(tests.get, test_id)
        record_types = load_list(container.training_catalog_service.record_types, active_only=True)
        columns = ranking_columns(record_types)
        rows = [
            {**flatten_ranking(entry, record_types), "medal": medal(entry.get("rank")) or ""}
            for entry in load_list(tests.rankings, test_id)
        ]
        return render_template(
            "page.html",
            title=f"순위 - {test.name}" if test else "순위",
            actions=[Link("엑셀 다운로드", url_for("training_test_rankings_export", test_id=test_id))],
            tables=[
                Table(
                    columns=[Column("medal", "메달"), *(Column(key, label) for key, label in columns.items())],
                    rows=rows,
                )
            ],
            back_url=url_for("training_test_detail", test_id=test_id),
        )

    @app.route("/training/tests/<int:test_id>/rankings.xlsx", endpoint="training_test_rankings_export")
    @training()
    def training_test_rankings_export(test_id: int):
        try:
            output = tests.rankings_workbook(test_id)
        except (ValidationError, ApiError) as e:
            flash_failure(e, "엑셀 생성에 실패했습니다")
            return redirect(url_for("training_test_rankings", test_id=test_id))
        return send_file(
            output,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"test_{test_id}_rankings.xlsx",
        )
