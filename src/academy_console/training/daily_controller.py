from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..container import Container
from ..core.enums import TIME_SLOT_OPTIONS
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, form_data, load_item, load_list, run_action
from ..web.views import Column, Field, FormBlock, Link, Table
from .model import CONDITION_OPTIONS
from .options import exercise_options, instructor_options, selected_ids, student_options


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    daily = container.daily_training_service

    def training(action: str = "view"):
        return guards.feature_required("training", "training", action)

    def day_args(source) -> tuple[str, str]:
        return source.get("date") or today_local().isoformat(), source.get("time_slot", "")

    # --- plans ---

    def plan_fields():
        return [
            Field("date", "날짜", kind="date", required=True),
            Field("time_slot", "시간대", kind="select", options={"": "선택 안 함", **TIME_SLOT_OPTIONS}),
            Field("instructor_id", "담당 강사", kind="select", options=instructor_options(container, blank="선택 안 함")),
            Field("class_id", "반 번호", kind="number"),
            Field("conditions", "특이사항", kind="textarea"),
            Field("exercise_ids", "운동", kind="checkboxes", options=exercise_options(container)),
        ]

    @app.route("/training/plans", methods=["GET", "POST"], endpoint="training_plans")
    @training()
    def training_plans():
        if request.method == "POST":
            run_action(
                lambda: daily.create_plan(form_data(), exercise_ids=request.form.getlist("exercise_ids")),
                success="훈련 계획이 추가되었습니다",
                failure="훈련 계획 저장에 실패했습니다",
            )
            return redirect(url_for("training_plans", date=request.form.get("date") or None))

        date, time_slot = day_args(request.args)
        return render_template(
            "page.html",
            title="훈련 계획",
            actions=[Link("반 배정", url_for("training_assignments", date=date)), Link("훈련 일지", url_for("training_logs", date=date))],
            filters=[
                Field("date", "날짜", kind="date"),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            filter_values={"date": date, "time_slot": time_slot},
            tables=[
                Table(
                    columns=[
                        Column("date", "날짜", fmt="date"),
                        Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                        Column("instructor_name", "강사"),
                        Column("exercise_names", "운동"),
                        Column("conditions", "특이사항"),
                    ],
                    rows=load_list(daily.plans, date=date, time_slot=time_slot),
                    row_url=lambda r: url_for("training_plan_detail", plan_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_plan_delete", plan_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[FormBlock(title="계획 추가", action=url_for("training_plans"), fields=plan_fields(), values={"date": date, "time_slot": time_slot}, submit_label="추가")],
        )

    @app.route("/training/plans/<int:plan_id>", methods=["GET", "POST"], endpoint="training_plan_detail")
    @training("edit")
    def training_plan_detail(plan_id: int):
        if request.method == "POST":
            if run_action(
                lambda: daily.update_plan(plan_id, form_data(), exercise_ids=request.form.getlist("exercise_ids")),
                success="저장되었습니다",
                failure="훈련 계획 저장에 실패했습니다",
            ):
                return redirect(url_for("training_plan_detail", plan_id=plan_id))

        plan = load_item(daily.get_plan, plan_id)
        if plan is None:
            flash("훈련 계획을 찾을 수 없습니다", "warning")
            return redirect(url_for("training_plans"))

        exercises = exercise_options(container)
        values = {
            "date": plan.get("date") or "",
            "time_slot": plan.get("time_slot") or "",
            "instructor_id": str(plan.get("instructor_id") or ""),
            "class_id": plan.get("class_id") or "",
            "conditions": plan.get("conditions") or "",
            "exercise_ids": selected_ids(plan, "exercises"),
        }
        return render_template(
            "page.html",
            title=f"훈련 계획 - {plan.get('date', '')}",
            forms=[
                FormBlock(action=url_for("training_plan_detail", plan_id=plan_id), fields=plan_fields(), values=values),
                FormBlock(
                    title="운동 교체",
                    action=url_for("training_plan_replace_exercise", plan_id=plan_id),
                    fields=[Field("exercise_id", "운동", kind="select", options={"": "선택", **exercises}, required=True)],
                    submit_label="교체",
                ),
                FormBlock(
                    title="추가 운동",
                    action=url_for("training_plan_add_extra", plan_id=plan_id),
                    fields=[Field("exercise_id", "운동", kind="select", options={"": "선택", **exercises}, required=True)],
                    submit_label="추가",
                ),
            ],
            back_url=url_for("training_plans", date=plan.get("date") or None),
        )

    @app.route("/training/plans/<int:plan_id>/exercise", methods=["POST"], endpoint="training_plan_replace_exercise")
    @training("edit")
    def training_plan_replace_exercise(plan_id: int):
        run_action(lambda: daily.replace_plan_exercise(plan_id, request.form.get("exercise_id")), success="운동이 교체되었습니다", failure="운동 교체에 실패했습니다")
        return redirect(url_for("training_plan_detail", plan_id=plan_id))

    @app.route("/training/plans/<int:plan_id>/extra", methods=["POST"], endpoint="training_plan_add_extra")
    @training("edit")
    def training_plan_add_extra(plan_id: int):
        run_action(lambda: daily.add_extra_exercise(plan_id, request.form.get("exercise_id")), success="추가 운동이 등록되었습니다", failure="추가 운동 등록에 실패했습니다")
        return redirect(url_for("training_plan_detail", plan_id=plan_id))

    @app.route("/training/plans/<int:plan_id>/delete", methods=["POST"], endpoint="training_plan_delete")
    @training("delete")
    def training_plan_delete(plan_id: int):
        run_action(lambda: daily.delete_plan(plan_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_plans"))

    # --- class assignments ---

    @app.route("/training/assignments", endpoint="training_assignments")
    @training()
    def training_assignments():
        date, time_slot = day_args(request.args)
        students = {k: v for k, v in student_options(container).items() if k}
        slot_select = Field("time_slot", "시간대", kind="select", options=TIME_SLOT_OPTIONS, required=True)
        hidden_date = Field("date", "", kind="hidden")
        day_values = {"date": date, "time_slot": time_slot or next(iter(TIME_SLOT_OPTIONS))}
        return render_template(
            "page.html",
            title="반 배정",
            actions=[
                Link("일정에서 불러오기", url_for("training_assignment_sync", date=date, time_slot=time_slot), method="post"),
                Link("배정 초기화", url_for("training_assignment_reset", date=date), method="post", confirm="해당 날짜의 배정을 초기화하시겠습니까?"),
            ],
            filters=[
                Field("date", "날짜", kind="date"),
                Field("time_slot", "시간대", kind="select", options={"": "전체", **TIME_SLOT_OPTIONS}),
            ],
            filter_values={"date": date, "time_slot": time_slot},
            tables=[
                Table(
                    title="배정 현황",
                    columns=[
                        Column("student_name", "학생"),
                        Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                        Column("class_id", "반"),
                        Column("class_name", "반 이름"),
                    ],
                    rows=load_list(daily.assignments, date=date, time_slot=time_slot),
                    row_actions=lambda r: [
                        Link("배정 해제", url_for("training_unassign", assignment_id=r.get("id"), date=date), method="post", confirm="배정을 해제하시겠습니까?")
                    ],
                ),
                Table(
                    title="반별 강사",
                    columns=[
                        Column("class_id", "반"),
                        Column("time_slot", "시간대", labels=TIME_SLOT_OPTIONS),
                        Column("instructor_name", "강사"),
                    ],
                    rows=load_list(daily.class_instructors, date=date, time_slot=time_slot),
                ),
            ],
            forms=[
                FormBlock(
                    title="학생 배정",
                    action=url_for("training_assign"),
                    fields=[hidden_date, slot_select, Field("class_id", "반 번호", kind="number"), Field("student_ids", "학생", kind="checkboxes", options=students)],
                    values=day_values,
                    submit_label="배정",
                ),
                FormBlock(
                    title="다른 반으로 이동",
                    action=url_for("training_assignment_move"),
                    fields=[
                        hidden_date,
                        slot_select,
                        Field("class_id", "이동할 반", kind="number", help="비우면 미배정으로 이동합니다"),
                        Field("student_ids", "학생", kind="checkboxes", options=students),
                    ],
                    values=day_values,
                    submit_label="이동",
                ),
                FormBlock(
                    title="학생 동기화",
                    action=url_for("training_assignment_sync_students"),
                    fields=[hidden_date, Field("class_id", "반 번호", kind="number"), Field("student_ids", "학생", kind="checkboxes", options=students)],
                    values=day_values,
                    submit_label="동기화",
                ),
                FormBlock(
                    title="강사 배정",
                    action=url_for("training_assign_instructor"),
                    fields=[
                        hidden_date,
                        slot_select,
                        Field("class_id", "반 번호", kind="number"),
                        Field("instructor_id", "강사", kind="select", options=instructor_options(container), required=True),
                    ],
                    values=day_values,
                    submit_label="배정",
                ),
            ],
        )

    def back_to_assignments():
        return redirect(url_for("training_assignments", date=request.values.get("date") or None))

    @app.route("/training/assignments/assign", methods=["POST"], endpoint="training_assign")
    @training("edit")
    def training_assign():
        try:
            count = daily.assign(
                date=request.form.get("date", ""),
                time_slot=request.form.get("time_slot", ""),
                student_ids=request.form.getlist("student_ids"),
                class_id=request.form.get("class_id"),
            )
            flash(f"{count}명이 배정되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "배정에 실패했습니다")
        return back_to_assignments()

    @app.route("/training/assignments/move", methods=["POST"], endpoint="training_assignment_move")
    @training("edit")
    def training_assignment_move():
        run_action(
            lambda: daily.move(
                date=request.form.get("date", ""),
                time_slot=request.form.get("time_slot", ""),
                student_ids=request.form.getlist("student_ids"),
                class_id=request.form.get("class_id"),
            ),
            success="이동되었습니다",
            failure="이동에 실패했습니다",
        )
        return back_to_assignments()

    @app.route("/training/assignments/<int:assignment_id>/delete", methods=["POST"], endpoint="training_unassign")
    @training("edit")
    def training_unassign(assignment_id: int):
        run_action(lambda: daily.unassign(assignment_id), success="배정이 해제되었습니다", failure="배정 해제에 실패했습니다")
        return back_to_assignments()

    @app.route("/training/assignments/sync", methods=["POST"], endpoint="training_assignment_sync")
    @training("edit")
    def training_assignment_sync():
        run_action(
            lambda: daily.sync(date=request.values.get("date", ""), time_slot=request.values.get("time_slot")),
            success="일정의 학생을 불러왔습니다",
            failure="동기화에 실패했습니다",
        )
        return back_to_assignments()

    @app.route("/training/assignments/sync-students", methods=["POST"], endpoint="training_assignment_sync_students")
    @training("edit")
    def training_assignment_sync_students():
        run_action(
            lambda: daily.sync_students(
                date=request.form.get("date", ""),
                class_id=request.form.get("class_id"),
                student_ids=request.form.getlist("student_ids"),
            ),
            success="학생이 동기화되었습니다",
            failure="동기화에 실패했습니다",
        )
        return back_to_assignments()

    @app.route("/training/assignments/reset", methods=["POST"], endpoint="training_assignment_reset")
    @training("delete")
    def training_assignment_reset():
        run_action(
            lambda: daily.reset(date=request.values.get("date", ""), class_id=request.values.get("class_id")),
            success="배정이 초기화되었습니다",
            failure="초기화에 실패했습니다",
        )
        return back_to_assignments()

    @app.route("/training/assignments/instructor", methods=["POST"], endpoint="training_assign_instructor")
    @training("edit")
    def training_assign_instructor():
        run_action(
            lambda: daily.assign_instructor(
                instructor_id=request.form.get("instructor_id"),
                date=request.form.get("date", ""),
                time_slot=request.form.get("time_slot", ""),
                class_id=request.form.get("class_id"),
            ),
            success="강사가 배정되었습니다",
            failure="강사 배정에 실패했습니다",
        )
        return back_to_assignments()

    # --- logs ---

    def log_fields():
        return [
            Field("date", "날짜", kind="date", required=True),
            Field("time_slot", "시간대", kind="select", options={"": "선택 안 함", **TIME_SLOT_OPTIONS}),
            Field("student_id", "학생", kind="select", options=student_options(container, blank="반 전체")),
            Field("instructor_id", "강사", kind="select", options=instructor_options(container, blank="선택 안 함")),
            Field("condition", "컨디션", kind="select", options={"": "선택 안 함", **CONDITION_OPTIONS}),
            Field("content", "훈련 내용", kind="textarea"),
            Field("notes", "메모", kind="textarea"),
        ]

    @app.route("/training/logs", methods=["GET", "POST"], endpoint="training_logs")
    @training()
    def training_logs():
        if request.method == "POST":
            run_action(lambda: daily.create_log(form_data()), success="일지가 저장되었습니다", failure="일지 저장에 실패했습니다")
            return redirect(url_for("training_logs", date=request.form.get("date") or None))

        date = request.args.get("date") or today_local().isoformat()
        student_id = request.args.get("student_id", "")
        return render_template(
            "page.html",
            title="훈련 일지",
            filters=[
                Field("date", "날짜", kind="date"),
                Field("student_id", "학생", kind="select", options=student_options(container, blank="전체")),
            ],
            filter_values={"date": date, "student_id": student_id},
            tables=[
                Table(
                    columns=[
                        Column("date", "날짜", fmt="date"),
                        Column("student_name", "학생"),
                        Column("instructor_name", "강사"),
                        Column("condition", "컨디션", labels=CONDITION_OPTIONS),
                        Column("content", "내용"),
                    ],
                    rows=load_list(daily.logs, date=date, student_id=student_id),
                    row_url=lambda r: url_for("training_log_detail", log_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_log_delete", log_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[FormBlock(title="일지 작성", action=url_for("training_logs"), fields=log_fields(), values={"date": date, "student_id": student_id}, submit_label="작성")],
        )

    @app.route("/training/logs/<int:log_id>", methods=["GET", "POST"], endpoint="training_log_detail")
    @training("edit")
    def training_log_detail(log_id: int):
        if request.method == "POST":
            if run_action(lambda: daily.update_log(log_id, form_data()), success="저장되었습니다", failure="일지 저장에 실패했습니다"):
                return redirect(url_for("training_log_detail", log_id=log_id))

        log = load_item(daily.get_log, log_id)
        if log is None:
            flash("일지를 찾을 수 없습니다", "warning")
            return redirect(url_for("training_logs"))
        values = {k: log.get(k) or "" for k in ("date", "time_slot", "condition", "content", "notes")}
        values.update({k: str(log.get(k) or "") for k in ("student_id", "instructor_id")})
        return render_template(
            "page.html",
            title=f"훈련 일지 - {log.get('date', '')}",
            forms=[
                FormBlock(action=url_for("training_log_detail", log_id=log_id), fields=log_fields(), values=values),
                FormBlock(
                    title="컨디션만 변경",
                    action=url_for("training_log_condition", log_id=log_id),
                    fields=[
                        Field("condition", "컨디션", kind="select", options=CONDITION_OPTIONS, required=True),
                        Field("student_id", "", kind="hidden"),
                    ],
                    values={"condition": log.get("condition") or "normal", "student_id": str(log.get("student_id") or "")},
                    submit_label="변경",
                ),
            ],
            back_url=url_for("training_logs", date=log.get("date") or None),
        )

    @app.route("/training/logs/<int:log_id>/condition", methods=["POST"], endpoint="training_log_condition")
    @training("edit")
    def training_log_condition(log_id: int):
        run_action(
            lambda: daily.set_condition(log_id, condition=request.form.get("condition", ""), student_id=request.form.get("student_id")),
            success="컨디션이 변경되었습니다",
            failure="컨디션 변경에 실패했습니다",
        )
        return redirect(url_for("training_log_detail", log_id=log_id))

    @app.route("/training/logs/<int:log_id>/delete", methods=["POST"], endpoint="training_log_delete")
    @training("delete")
    def training_log_delete(log_id: int):
        run_action(lambda: daily.delete_log(log_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_logs"))
