from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import current_year_month
from ..common.formatting import format_krw
from ..container import Container
from ..core.enums import PAYMENT_METHOD_LABELS
from ..core.exceptions import ApiError, ValidationError
from ..web.crud import CrudHandlers, CrudPage, register_crud
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_item, load_list
from ..web.views import Column, Field, FormBlock, Link, Table

METHOD_OPTIONS = {m.value: label for m, label in PAYMENT_METHOD_LABELS.items()}
SALARY_STATUS_LABELS = {"pending": "미지급", "paid": "지급완료"}


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    payments = container.payment_service
    salaries = container.salary_service
    incomes = container.income_service
    expenses = container.expense_service

    # --- payments ---

    def payment_fields():
        students = load_list(container.student_service.list)
        return [
            Field("student_id", "학생", kind="select", options={"": "선택", **{str(s.get("id")): s.get("name", "") for s in students}}, required=True),
            Field("month", "수납월", kind="month", required=True),
            Field("amount", "금액", kind="number", required=True),
            Field("method", "수납방법", kind="select", options=METHOD_OPTIONS, required=True),
            Field("memo", "메모", kind="textarea"),
        ]

    register_crud(
        app,
        guards,
        CrudPage(
            name="payment",
            list_endpoint="payments",
            url="/payments",
            permission="payments",
            module="finance",
            title="수납 관리",
            noun="수납",
            columns=[
                Column("student_name", "학생"),
                Column("month", "수납월"),
                Column("amount", "금액", fmt="krw"),
                Column("method", "수납방법", labels=METHOD_OPTIONS),
                Column("paid_at", "수납일", fmt="date"),
            ],
            fields=payment_fields,
            filters=[Field("month", "수납월", kind="month"), Field("search", "검색", placeholder="학생 이름"), Field("student_id", "학생 번호", kind="hidden")],
            list_actions=lambda: [Link("적립금", url_for("payment_credits"))],
        ),
        CrudHandlers(
            list_rows=lambda f: payments.list(month=f.get("month"), student_id=f.get("student_id"), search=f.get("search")),
            get=payments.get,
            create=payments.create,
            update=payments.update,
            delete=payments.delete,
            values=lambda p: {
                "student_id": str(p.student_id),
                "month": p.month,
                "amount": p.amount,
                "method": p.method.value,
                "memo": p.memo or "",
            },
            item_title=lambda p: f"수납 - {p.student_name} {p.month}",
        ),
    )

    @app.route("/payments/credits", endpoint="payment_credits")
    @guards.feature_required("finance", "payments")
    def payment_credits():
        student_id = request.args.get("student_id", "")
        rows = load_list(payments.credits, student_id=student_id)
        return render_template(
            "page.html",
            title="적립금",
            filters=[Field("student_id", "학생 번호", kind="number")],
            filter_values={"student_id": student_id},
            tables=[
                Table(
                    columns=[Column("student_name", "학생"), Column("amount", "금액", fmt="krw"), Column("reason", "사유"), Column("created_at", "일자", fmt="date")],
                    rows=rows,
                )
            ],
            back_url=url_for("payments"),
        )

    # --- salaries ---

    @app.route("/salaries", endpoint="salaries")
    @guards.feature_required("finance", "salaries")
    def salary_list():
        year_month = request.args.get("year_month") or current_year_month()
        rows = load_list(salaries.list, year_month=year_month)
        return render_template(
            "page.html",
            title="급여 관리",
            filters=[Field("year_month", "정산월", kind="month")],
            filter_values={"year_month": year_month},
            forms=[
                FormBlock(
                    title="급여 정산",
                    action=url_for("salary_generate"),
                    fields=[Field("year_month", "정산월", kind="month", required=True)],
                    values={"year_month": year_month},
                    submit_label="정산 생성",
                )
            ],
            tables=[
                Table(
                    columns=[
                        Column("instructor_name", "강사"),
                        Column("year_month", "정산월"),
                        Column("base_amount", "기본급", fmt="krw"),
                        Column("overtime_amount", "초과근무", fmt="krw"),
                        Column("deduction", "공제", fmt="krw"),
                        Column("total_amount", "실지급액", fmt="krw"),
                        Column("status", "상태", labels=SALARY_STATUS_LABELS),
                    ],
                    rows=rows,
                    row_url=lambda r: url_for("salary_detail", salary_id=r.get("id")),
                )
            ],
        )

    @app.route("/salaries/generate", methods=["POST"], endpoint="salary_generate")
    @guards.feature_required("finance", "salaries", "create")
    def salary_generate():
        year_month = request.form.get("year_month", "")
        try:
            year_month = salaries.generate(year_month)
            flash(f"{year_month} 급여가 정산되었습니다", "success")
        except (ValidationError, ApiError) as e:
            flash_failure(e, "급여 정산에 실패했습니다")
        return redirect(url_for("salaries", year_month=year_month or None))

    @app.route("/salaries/<int:salary_id>", endpoint="salary_detail")
    @guards.feature_required("finance", "salaries")
    def salary_detail(salary_id: int):
        salary = load_item(salaries.get, salary_id)
        if salary is None:
            flash("급여 정보를 찾을 수 없습니다", "warning")
            return redirect(url_for("salaries"))
        return render_template(
            "page.html",
            title=f"급여 - {salary.instructor_name} {salary.year_month}",
            pairs=[
                ("기본급", format_krw(salary.base_amount)),
                ("초과근무", format_krw(salary.overtime_amount)),
                ("공제", format_krw(salary.deduction)),
                ("실지급액", format_krw(salary.net_amount)),
                ("상태", SALARY_STATUS_LABELS.get(salary.status, salary.status or "-")),
            ],
            back_url=url_for("salaries", year_month=salary.year_month),
        )

    # --- incomes ---

    @app.route("/incomes", endpoint="incomes")
    @guards.feature_required("finance", "incomes")
    def income_list():
        year_month = request.args.get("year_month") or current_year_month()
        rows = load_list(incomes.list, year_month=year_month)
        summary = load_item(incomes.summary, year_month=year_month) or {}
        return render_template(
            "page.html",
            title="수입 관리",
            filters=[Field("year_month", "조회월", kind="month")],
            filter_values={"year_month": year_month},
            pairs=[
                ("총 수입", format_krw(summary.get("total_income"))),
                ("총 지출", format_krw(summary.get("total_expense"))),
                ("순이익", format_krw(summary.get("net_income"))),
            ],
            tables=[
                Table(
                    columns=[Column("date", "날짜", fmt="date"), Column("category", "구분"), Column("description", "내용"), Column("amount", "금액", fmt="krw")],
                    rows=rows,
                )
            ],
        )

    # --- expenses ---

    def expense_fields():
        return [
            Field("category", "카테고리", kind="select", options={c: c for c in expenses.categories()}, required=True),
            Field("description", "내용", required=True),
            Field("amount", "금액", kind="number", required=True),
            Field("date", "날짜", kind="date", required=True),
        ]

    def expense_extras(expense_id, expense):
        return {"pairs": [("금액", format_krw(expense.get("amount")))]}

    register_crud(
        app,
        guards,
        CrudPage(
            name="expense",
            list_endpoint="expenses",
            url="/expenses",
            permission="expenses",
            module="finance",
            title="지출 관리",
            noun="지출",
            columns=[
                Column("date", "날짜", fmt="date"),
                Column("category", "카테고리"),
                Column("description", "내용"),
                Column("amount", "금액", fmt="krw"),
            ],
            fields=expense_fields,
            filters=[Field("year_month", "조회월", kind="month"), Field("category", "카테고리")],
            list_actions=lambda: [Link("카테고리별 합계", url_for("expense_totals", year_month=request.args.get("year_month") or current_year_month()))],
        ),
        CrudHandlers(
            list_rows=lambda f: expenses.list(year_month=f.get("year_month"), category=f.get("category")),
            get=expenses.get,
            create=expenses.create,
            update=expenses.update,
            delete=expenses.delete,
            values=lambda e: {k: e.get(k) or "" for k in ("category", "description", "amount", "date")},
            item_title=lambda e: f"지출 - {e.get('description') or ''}",
            detail_extras=expense_extras,
        ),
    )

    @app.route("/expenses/totals", endpoint="expense_totals")
    @guards.feature_required("finance", "expenses")
    def expense_totals():
        year_month = request.args.get("year_month") or current_year_month()
        rows = load_list(expenses.list, year_month=year_month)
        totals = expenses.totals_by_category(rows)
        return render_template(
            "page.html",
            title="카테고리별 지출",
            filters=[Field("year_month", "조회월", kind="month")],
            filter_values={"year_month": year_month},
            pairs=[("합계", format_krw(sum(amount for _, amount in totals)))],
            tables=[
                Table(
                    columns=[Column("category", "카테고리"), Column("amount", "금액", fmt="krw")],
                    rows=[{"category": c, "amount": a} for c, a in totals],
                )
            ],
            back_url=url_for("expenses"),
        )
