from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import RecordDirection
from ..web.guards import make_guards
from ..web.helpers import form_data, load_item, load_list, run_action
from ..web.views import Column, Field, FormBlock, Link, Table
from .model import DIRECTION_LABELS, GENDER_LABELS
from .options import exercise_options, record_type_options, selected_ids, student_options, tag_options

DIRECTION_OPTIONS = {d.value: label for d, label in DIRECTION_LABELS.items()}

RANGE_ROWS = 10


def _ranges_from_form() -> list[dict]:
    return [
        {key: request.form.get(f"{key}_{i}", "") for key in ("min_value", "max_value", "score", "grade")}
        for i in range(RANGE_ROWS)
    ]


def _range_fields() -> list[Field]:
    fields = []
    for i in range(RANGE_ROWS):
        fields += [
            Field(f"min_value_{i}", f"{i + 1}. 최솟값", kind="number"),
            Field(f"max_value_{i}", "최댓값", kind="number"),
            Field(f"score_{i}", "점수", kind="number"),
            Field(f"grade_{i}", "등급"),
        ]
    return fields


def _range_values(table) -> dict:
    values = {}
    for i, r in enumerate((table or {}).get("ranges") or []):
        if i >= RANGE_ROWS:
            break
        for key in ("min_value", "max_value", "score", "grade"):
            values[f"{key}_{i}"] = r.get(key, "")
    return values


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    catalog = container.training_catalog_service

    def training(action: str = "view"):
        return guards.feature_required("training", "training", action)

    # --- record types ---

    record_type_fields = [
        Field("name", "종목명", required=True),
        Field("unit", "단위", placeholder="초, cm, 회"),
        Field("direction", "기록 방향", kind="select", options=DIRECTION_OPTIONS),
        Field("sort_order", "정렬 순서", kind="number"),
        Field("description", "설명", kind="textarea"),
        Field("is_active", "사용", kind="checkbox"),
    ]

    @app.route("/training/record-types", methods=["GET", "POST"], endpoint="training_record_types")
    @training()
    def training_record_types():
        if request.method == "POST":
            run_action(lambda: catalog.create_record_type(form_data()), success="종목이 추가되었습니다", failure="종목 저장에 실패했습니다")
            return redirect(url_for("training_record_types"))

        types = load_list(catalog.record_types)
        return render_template(
            "page.html",
            title="측정 종목",
            actions=[Link("배점표", url_for("training_score_tables"))],
            tables=[
                Table(
                    columns=[Column("name", "종목명"), Column("unit", "단위"), Column("direction", "기록 방향", labels=DIRECTION_OPTIONS), Column("is_active", "사용")],
                    rows=[
                        {"id": t.record_type_id, "name": t.name, "unit": t.unit, "direction": t.direction.value, "is_active": t.is_active}
                        for t in types
                    ],
                    row_url=lambda r: url_for("training_record_type_edit", record_type_id=r["id"]),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_record_type_delete", record_type_id=r["id"]), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[
                FormBlock(
                    title="종목 추가",
                    action=url_for("training_record_types"),
                    fields=record_type_fields,
                    values={"direction": RecordDirection.HIGHER.value, "is_active": True},
                    submit_label="추가",
                )
            ],
            back_url=url_for("training_records"),
        )

    @app.route("/training/record-types/<int:record_type_id>", methods=["GET", "POST"], endpoint="training_record_type_edit")
    @training("edit")
    def training_record_type_edit(record_type_id: int):
        if request.method == "POST":
            if run_action(lambda: catalog.update_record_type(record_type_id, form_data()), success="저장되었습니다", failure="종목 저장에 실패했습니다"):
                return redirect(url_for("training_record_types"))

        record_type = load_item(catalog.record_type, record_type_id)
        if record_type is None:
            flash("종목을 찾을 수 없습니다", "warning")
            return redirect(url_for("training_record_types"))
        return render_template(
            "page.html",
            title=f"종목 - {record_type.name}",
            forms=[
                FormBlock(
                    action=url_for("training_record_type_edit", record_type_id=record_type_id),
                    fields=record_type_fields,
                    values={
                        "name": record_type.name,
                        "unit": record_type.unit or "",
                        "direction": record_type.direction.value,
                        "sort_order": record_type.display_order,
                        "is_active": record_type.is_active,
                    },
                )
            ],
            back_url=url_for("training_record_types"),
        )

    @app.route("/training/record-types/<int:record_type_id>/delete", methods=["POST"], endpoint="training_record_type_delete")
    @training("delete")
    def training_record_type_delete(record_type_id: int):
        run_action(lambda: catalog.delete_record_type(record_type_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_record_types"))

    # --- score tables ---

    def score_table_fields():
        return [
            Field("record_type_id", "종목", kind="select", options=record_type_options(container), required=True),
            Field("name", "이름"),
            Field("gender", "성별", kind="select", options={"": "공통", **GENDER_LABELS}),
            *_range_fields(),
        ]

    @app.route("/training/score-tables", methods=["GET", "POST"], endpoint="training_score_tables")
    @training()
    def training_score_tables():
        if request.method == "POST":
            run_action(
                lambda: catalog.create_score_table(form_data(), _ranges_from_form()),
                success="배점표가 추가되었습니다",
                failure="배점표 저장에 실패했습니다",
            )
            return redirect(url_for("training_score_tables"))

        record_type_id = request.args.get("record_type_id", "")
        rows = load_list(catalog.score_tables, record_type_id=record_type_id)
        return render_template(
            "page.html",
            title="배점표",
            filters=[Field("record_type_id", "종목", kind="select", options=record_type_options(container, blank="전체"))],
            filter_values={"record_type_id": record_type_id},
            tables=[
                Table(
                    columns=[Column("record_type_name", "종목"), Column("name", "이름"), Column("gender", "성별", labels=GENDER_LABELS)],
                    rows=rows,
                    row_url=lambda r: url_for("training_score_table_edit", table_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_score_table_delete", table_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[FormBlock(title="배점표 추가", action=url_for("training_score_tables"), fields=score_table_fields(), submit_label="추가")],
            back_url=url_for("training_record_types"),
        )

    @app.route("/training/score-tables/<int:table_id>", methods=["GET", "POST"], endpoint="training_score_table_edit")
    @training("edit")
    def training_score_table_edit(table_id: int):
        if request.method == "POST":
            if run_action(
                lambda: catalog.update_score_table(table_id, form_data(), _ranges_from_form()),
                success="저장되었습니다",
                failure="배점표 저장에 실패했습니다",
            ):
                return redirect(url_for("training_score_tables"))

        table = load_item(catalog.score_table, table_id)
        if table is None:
            flash("배점표를 찾을 수 없습니다", "warning")
            return redirect(url_for("training_score_tables"))
        values = {
            "record_type_id": str(table.get("record_type_id") or ""),
            "name": table.get("name") or "",
            "gender": table.get("gender") or "",
            **_range_values(table),
        }
        return render_template(
            "page.html",
            title="배점표 수정",
            forms=[FormBlock(action=url_for("training_score_table_edit", table_id=table_id), fields=score_table_fields(), values=values)],
            back_url=url_for("training_score_tables"),
        )

    @app.route("/training/score-tables/<int:table_id>/delete", methods=["POST"], endpoint="training_score_table_delete")
    @training("delete")
    def training_score_table_delete(table_id: int):
        run_action(lambda: catalog.delete_score_table(table_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_score_tables"))

    # --- exercises and tags ---

    def exercise_fields():
        return [
            Field("name", "운동명", required=True),
            Field("category", "분류"),
            Field("video_url", "영상 주소", kind="url"),
            Field("description", "설명", kind="textarea"),
            Field("tag_ids", "태그", kind="checkboxes", options=tag_options(container)),
        ]

    @app.route("/training/exercises", methods=["GET", "POST"], endpoint="training_exercises")
    @training()
    def training_exercises():
        if request.method == "POST":
            run_action(
                lambda: catalog.create_exercise(form_data(), tag_ids=request.form.getlist("tag_ids")),
                success="운동이 추가되었습니다",
                failure="운동 저장에 실패했습니다",
            )
            return redirect(url_for("training_exercises"))

        search = request.args.get("search", "")
        tag_id = request.args.get("tag_id", "")
        rows = load_list(catalog.exercises, search=search, tag_id=tag_id)
        tags = load_list(catalog.tags)
        return render_template(
            "page.html",
            title="운동 관리",
            actions=[Link("운동 팩", url_for("training_packs")), Link("프리셋", url_for("training_presets"))],
            filters=[
                Field("search", "검색"),
                Field("tag_id", "태그", kind="select", options={"": "전체", **{str(t.get("id")): t.get("name", "") for t in tags}}),
            ],
            filter_values={"search": search, "tag_id": tag_id},
            tables=[
                Table(
                    columns=[Column("name", "운동명"), Column("category", "분류"), Column("tag_names", "태그")],
                    rows=rows,
                    row_url=lambda r: url_for("training_exercise_edit", exercise_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_exercise_delete", exercise_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                ),
                Table(
                    title="태그",
                    columns=[Column("name", "태그명"), Column("color", "색상")],
                    rows=tags,
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_tag_delete", tag_id=r.get("id")), method="post", confirm="태그를 삭제하시겠습니까?")
                    ],
                ),
            ],
            forms=[
                FormBlock(title="운동 추가", action=url_for("training_exercises"), fields=exercise_fields(), submit_label="추가"),
                FormBlock(
                    title="태그 추가 / 수정",
                    action=url_for("training_tag_save"),
                    fields=[
                        Field("tag_id", "수정할 태그", kind="select", options={"": "새 태그", **{str(t.get("id")): t.get("name", "") for t in tags}}),
                        Field("name", "태그명", required=True),
                        Field("color", "색상", kind="color"),
                    ],
                    values={"color": "#3b82f6"},
                ),
            ],
        )

    @app.route("/training/exercises/<int:exercise_id>", methods=["GET", "POST"], endpoint="training_exercise_edit")
    @training("edit")
    def training_exercise_edit(exercise_id: int):
        if request.method == "POST":
            if run_action(
                lambda: catalog.update_exercise(exercise_id, form_data(), tag_ids=request.form.getlist("tag_ids")),
                success="저장되었습니다",
                failure="운동 저장에 실패했습니다",
            ):
                return redirect(url_for("training_exercises"))

        exercise = load_item(catalog.exercise, exercise_id)
        if exercise is None:
            flash("운동을 찾을 수 없습니다", "warning")
            return redirect(url_for("training_exercises"))
        values = {k: exercise.get(k) or "" for k in ("name", "category", "video_url", "description")}
        values["tag_ids"] = selected_ids(exercise, "tags") or selected_ids(exercise, "tag_ids")
        return render_template(
            "page.html",
            title=f"운동 - {exercise.get('name', '')}",
            forms=[FormBlock(action=url_for("training_exercise_edit", exercise_id=exercise_id), fields=exercise_fields(), values=values)],
            back_url=url_for("training_exercises"),
        )

    @app.route("/training/exercises/<int:exercise_id>/delete", methods=["POST"], endpoint="training_exercise_delete")
    @training("delete")
    def training_exercise_delete(exercise_id: int):
        run_action(lambda: catalog.delete_exercise(exercise_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_exercises"))

    @app.route("/training/tags", methods=["POST"], endpoint="training_tag_save")
    @training("edit")
    def training_tag_save():
        tag_id = request.form.get("tag_id", "")
        name = request.form.get("name", "")
        color = request.form.get("color", "")
        if tag_id.isdigit():
            run_action(lambda: catalog.update_tag(int(tag_id), name=name, color=color), success="태그가 저장되었습니다", failure="태그 저장에 실패했습니다")
        else:
            run_action(lambda: catalog.create_tag(name=name, color=color), success="태그가 추가되었습니다", failure="태그 저장에 실패했습니다")
        return redirect(url_for("training_exercises"))

    @app.route("/training/tags/<int:tag_id>/delete", methods=["POST"], endpoint="training_tag_delete")
    @training("delete")
    def training_tag_delete(tag_id: int):
        run_action(lambda: catalog.delete_tag(tag_id), success="태그가 삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_exercises"))

    # --- packs and presets share one shape: name, description, exercises ---

    def bundle_fields():
        return [
            Field("name", "이름", required=True),
            Field("description", "설명", kind="textarea"),
            Field("exercise_ids", "운동", kind="checkboxes", options=exercise_options(container)),
        ]

    def bundle_args():
        return {
            "name": request.form.get("name", ""),
            "description": request.form.get("description", ""),
            "exercise_ids": request.form.getlist("exercise_ids"),
        }

    def bundle_values(item, key: str) -> dict:
        return {
            "name": item.get("name") or "",
            "description": item.get("description") or "",
            "exercise_ids": selected_ids(item, key) or selected_ids(item, "exercise_ids"),
        }

    @app.route("/training/packs", methods=["GET", "POST"], endpoint="training_packs")
    @training()
    def training_packs():
        if request.method == "POST":
            run_action(lambda: catalog.create_pack(**bundle_args()), success="팩이 추가되었습니다", failure="팩 저장에 실패했습니다")
            return redirect(url_for("training_packs"))

        return render_template(
            "page.html",
            title="운동 팩",
            tables=[
                Table(
                    columns=[Column("name", "이름"), Column("description", "설명"), Column("exercise_count", "운동 수")],
                    rows=load_list(catalog.packs),
                    row_url=lambda r: url_for("training_pack_edit", pack_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_pack_delete", pack_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[FormBlock(title="팩 추가", action=url_for("training_packs"), fields=bundle_fields(), submit_label="추가")],
            back_url=url_for("training_exercises"),
        )

    @app.route("/training/packs/<int:pack_id>", methods=["GET", "POST"], endpoint="training_pack_edit")
    @training("edit")
    def training_pack_edit(pack_id: int):
        if request.method == "POST":
            if run_action(lambda: catalog.update_pack(pack_id, **bundle_args()), success="저장되었습니다", failure="팩 저장에 실패했습니다"):
                return redirect(url_for("training_packs"))

        pack = load_item(catalog.pack, pack_id)
        if pack is None:
            flash("팩을 찾을 수 없습니다", "warning")
            return redirect(url_for("training_packs"))
        plans = load_list(container.daily_training_service.plans)
        return render_template(
            "page.html",
            title=f"운동 팩 - {pack.get('name', '')}",
            forms=[
                FormBlock(action=url_for("training_pack_edit", pack_id=pack_id), fields=bundle_fields(), values=bundle_values(pack, "exercises")),
                FormBlock(
                    title="팩 적용",
                    action=url_for("training_pack_apply", pack_id=pack_id),
                    fields=[
                        Field("date", "날짜", kind="date", required=True),
                        Field("plan_id", "훈련 계획", kind="select", options={"": "선택 안 함", **{str(p.get("id")): f"{p.get('date', '')} {p.get('class_name') or ''}".strip() for p in plans}}),
                        Field("student_ids", "학생", kind="checkboxes", options={k: v for k, v in student_options(container).items() if k}),
                    ],
                    submit_label="적용",
                ),
            ],
            back_url=url_for("training_packs"),
        )

    @app.route("/training/packs/<int:pack_id>/apply", methods=["POST"], endpoint="training_pack_apply")
    @training("edit")
    def training_pack_apply(pack_id: int):
        run_action(
            lambda: catalog.apply_pack(
                pack_id,
                date=request.form.get("date", ""),
                plan_id=request.form.get("plan_id") or None,
                class_id=request.form.get("class_id") or None,
                student_ids=request.form.getlist("student_ids"),
            ),
            success="팩이 적용되었습니다",
            failure="팩 적용에 실패했습니다",
        )
        return redirect(url_for("training_pack_edit", pack_id=pack_id))

    @app.route("/training/packs/<int:pack_id>/delete", methods=["POST"], endpoint="training_pack_delete")
    @training("delete")
    def training_pack_delete(pack_id: int):
        run_action(lambda: catalog.delete_pack(pack_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_packs"))

    @app.route("/training/presets", methods=["GET", "POST"], endpoint="training_presets")
    @training()
    def training_presets():
        if request.method == "POST":
            run_action(lambda: catalog.create_preset(**bundle_args()), success="프리셋이 추가되었습니다", failure="프리셋 저장에 실패했습니다")
            return redirect(url_for("training_presets"))

        return render_template(
            "page.html",
            title="훈련 프리셋",
            tables=[
                Table(
                    columns=[Column("name", "이름"), Column("description", "설명")],
                    rows=load_list(catalog.presets),
                    row_url=lambda r: url_for("training_preset_edit", preset_id=r.get("id")),
                    row_actions=lambda r: [
                        Link("삭제", url_for("training_preset_delete", preset_id=r.get("id")), method="post", confirm="삭제하시겠습니까?")
                    ],
                )
            ],
            forms=[FormBlock(title="프리셋 추가", action=url_for("training_presets"), fields=bundle_fields(), submit_label="추가")],
        )

    @app.route("/training/presets/<int:preset_id>", methods=["GET", "POST"], endpoint="training_preset_edit")
    @training("edit")
    def training_preset_edit(preset_id: int):
        if request.method == "POST":
            if run_action(lambda: catalog.update_preset(preset_id, **bundle_args()), success="저장되었습니다", failure="프리셋 저장에 실패했습니다"):
                return redirect(url_for("training_presets"))

        preset = load_item(catalog.preset, preset_id)
        if preset is None:
            flash("프리셋을 찾을 수 없습니다", "warning")
            return redirect(url_for("training_presets"))
        return render_template(
            "page.html",
            title=f"프리셋 - {preset.get('name', '')}",
            forms=[FormBlock(action=url_for("training_preset_edit", preset_id=preset_id), fields=bundle_fields(), values=bundle_values(preset, "exercises"))],
            back_url=url_for("training_presets"),
        )

    @app.route("/training/presets/<int:preset_id>/delete", methods=["POST"], endpoint="training_preset_delete")
    @training("delete")
    def training_preset_delete(preset_id: int):
        run_action(lambda: catalog.delete_preset(preset_id), success="삭제되었습니다", failure="삭제에 실패했습니다")
        return redirect(url_for("training_presets"))
