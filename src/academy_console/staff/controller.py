from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import ROLE_LABELS, UserRole
from ..core.exceptions import ApiError
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_item, load_list, run_action
from ..web.views import Column, Field, Link, Table
from .permissions import ACTION_LABELS, ACTIONS, PAGE_LABELS, PERMISSION_PAGES, cell_name, matrix_from_checked
from .service import ASSIGNABLE_ROLES

ROLE_OPTIONS = {r.value: label for r, label in ROLE_LABELS.items()}
ASSIGNABLE_ROLE_OPTIONS = {r: ROLE_OPTIONS[r] for r in ASSIGNABLE_ROLES}


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    staff = container.staff_service

    base_fields = [
        Field("name", "이름", required=True),
        Field("email", "이메일", kind="email", required=True),
        Field("phone", "연락처", kind="tel"),
        Field("role", "역할", kind="select", options=ASSIGNABLE_ROLE_OPTIONS),
    ]

    def detail_extras(staff_id, member):
        actions = []
        if member.role != UserRole.OWNER:
            actions.append(Link("권한 설정", url_for("staff_permissions", staff_id=staff_id)))
        return {"pairs": [("역할", ROLE_OPTIONS.get(member.role.value, member.role.value))], "actions": actions}

    register_crud(
        app,
        guards,
        CrudPage(
            name="staff",
            list_endpoint="staff",
            url="/staff",
            permission="staff",
            title="직원 관리",
            noun="직원",
            columns=[Column("name", "이름"), Column("email", "이메일"), Column("phone", "연락처"), Column("role", "역할", labels=ROLE_OPTIONS)],
            fields=[*base_fields, Field("password", "비밀번호", kind="password", required=True, help="6자 이상")],
            edit_fields=base_fields,
            filters=[
                Field("search", "검색", placeholder="이름 또는 이메일"),
                Field("role", "역할", kind="select", options={"": "전체", **ROLE_OPTIONS}),
            ],
            list_actions=lambda: [Link("사용자 목록", url_for("staff_users"))],
        ),
        CrudHandlers(
            list_rows=lambda f: staff.list(search=f.get("search"), role=f.get("role")),
            get=staff.get,
            create=staff.create,
            update=staff.update,
            delete=staff.delete,
            values=lambda m: {"name": m.name, "email": m.email, "phone": m.phone or "", "role": m.role.value},
            item_title=lambda m: f"직원 - {m.name}",
            detail_extras=detail_extras,
        ),
    )

    @app.route("/staff/users", endpoint="staff_users")
    @guards.permission_required("staff")
    def staff_users():
        search = request.args.get("search", "")
        rows = load_list(staff.list_users, search=search)
        return render_template(
            "page.html",
            title="사용자 목록",
            filters=[Field("search", "검색")],
            filter_values={"search": search},
            tables=[Table(columns=[Column("name", "이름"), Column("email", "이메일"), Column("role", "역할", labels=ROLE_OPTIONS)], rows=rows)],
            back_url=url_for("staff"),
        )

    @app.route("/staff/<int:staff_id>/permissions", methods=["GET", "POST"], endpoint="staff_permissions")
    @guards.permission_required("staff", "edit")
    def staff_permissions(staff_id: int):
        member = load_item(staff.get, staff_id)
        if member is None:
            flash("직원 정보를 찾을 수 없습니다", "warning")
            return redirect(url_for("staff"))

        if request.method == "POST":
            matrix = matrix_from_checked(request.form.keys())
            try:
                staff.save_permissions(staff_id, matrix)
                flash("권한이 저장되었습니다", "success")
            except ApiError as e:
                flash_failure(e, "권한 저장에 실패했습니다")
            return redirect(url_for("staff_permissions", staff_id=staff_id))

        return render_template(
            "staff/permissions.html",
            member=member,
            matrix=staff.permission_matrix(member),
            pages=PERMISSION_PAGES,
            page_labels=PAGE_LABELS,
            actions=ACTIONS,
            action_labels=ACTION_LABELS,
            cell_name=cell_name,
        )

    @app.route("/staff/<int:staff_id>/permissions/toggle", methods=["POST"], endpoint="staff_permission_toggle")
    @guards.permission_required("staff", "edit")
    def staff_permission_toggle(staff_id: int):
        member = load_item(staff.get, staff_id)
        if member is None:
            flash("직원 정보를 찾을 수 없습니다", "warning")
            return redirect(url_for("staff"))

        page, _, action = request.form.get("cell", "").partition(":")
        run_action(lambda: staff.toggle_cell(member, page, action), success="권한이 변경되었습니다", failure="권한 저장에 실패했습니다")
        return redirect(url_for("staff_permissions", staff_id=staff_id))
