from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import current_year_month, parse_iso_date
from ..common.validators import (
    compact,
    optional_text,
    require_choice,
    require_non_empty,
    require_positive_int,
    require_year_month,
)
from ..core.enums import PaymentMethod
from ..core.exceptions import ApiError, ValidationError
from .model import Payment, Salary
from .repository import ExpenseRepository, IncomeRepository, PaymentRepository, SalaryRepository

logger = logging.getLogger(__name__)

DEFAULT_EXPENSE_CATEGORIES = ("임대료", "인건비", "교재비", "시설관리", "광고/마케팅", "소모품", "기타")

_YEAR_MONTH_MESSAGE = "조회월 형식이 올바르지 않습니다 (YYYY-MM)"


class PaymentService:
    def __init__(self, payments: PaymentRepository):
        self._payments = payments

    def list(self, *, month: Optional[str] = None, student_id=None, search: Optional[str] = None) -> Sequence[dict]:
        month = optional_text(month)
        if month:
            require_year_month(month, _YEAR_MONTH_MESSAGE)
        return self._payments.list({"month": month, "student_id": student_id or None, "search": optional_text(search)})

    def get(self, payment_id: int) -> Optional[Payment]:
        return self._payments.get(int(payment_id))

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        student_id = require_positive_int(form.get("student_id"), "학생을 선택하세요")
        month = require_non_empty(form.get("month"), "수납월을 입력하세요")
        require_year_month(month, "수납월 형식이 올바르지 않습니다 (YYYY-MM)")
        amount = require_positive_int(form.get("amount"), "금액은 1원 이상이어야 합니다")
        method = require_choice(form.get("method"), [m.value for m in PaymentMethod], "수납방법을 선택하세요")
        return compact(
            {
                "student_id": student_id,
                "month": month,
                "amount": amount,
                "method": method,
                "memo": optional_text(form.get("memo")),
            }
        )

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        return self._payments.create(self._payload(form))

    def update(self, payment_id: int, form: Mapping[str, str]) -> None:
        self._payments.update(int(payment_id), self._payload(form))

    def delete(self, payment_id: int) -> None:
        self._payments.delete(int(payment_id))

    def credits(self, *, student_id=None) -> Sequence[dict]:
        return self._payments.credits({"student_id": student_id or None})


class SalaryService:
    def __init__(self, salaries: SalaryRepository):
        self._salaries = salaries

    def list(self, *, year_month: Optional[str] = None) -> Sequence[dict]:
        year_month = require_year_month(year_month or current_year_month(), _YEAR_MONTH_MESSAGE)
        return self._salaries.list({"year_month": year_month})

    def get(self, salary_id: int) -> Optional[Salary]:
        return self._salaries.get(int(salary_id))

    def generate(self, year_month: str) -> str:
        year_month = require_year_month(year_month, "정산월 형식이 올바르지 않습니다 (YYYY-MM)")
        self._salaries.generate({"year_month": year_month})
        return year_month


class IncomeService:
    def __init__(self, incomes: IncomeRepository):
        self._incomes = incomes

    def list(self, *, year_month: Optional[str] = None) -> Sequence[dict]:
        year_month = require_year_month(year_month or current_year_month(), _YEAR_MONTH_MESSAGE)
        return self._incomes.list({"year_month": year_month})

    def summary(self, *, year_month: Optional[str] = None) -> dict:
        year_month = require_year_month(year_month or current_year_month(), _YEAR_MONTH_MESSAGE)
        return self._incomes.summary({"year_month": year_month}) or {}


class ExpenseService:
    def __init__(self, expenses: ExpenseRepository):
        self._expenses = expenses

    def list(self, *, year_month: Optional[str] = None, category: Optional[str] = None) -> Sequence[dict]:
        return self._expenses.list({"year_month": optional_text(year_month), "category": optional_text(category)})

    def get(self, expense_id: int) -> Optional[dict]:
        return self._expenses.get_raw(int(expense_id))

    def categories(self) -> Sequence[str]:
        """Categories known to the API, or the built-in list when it has none."""
        try:
            categories = self._expenses.categories()
        except ApiError as e:
            logger.warning("expense categories unavailable: %s", e)
            categories = []
        return list(categories) or list(DEFAULT_EXPENSE_CATEGORIES)

    @staticmethod
    def _payload(form: Mapping[str, str]) -> dict:
        category = require_non_empty(form.get("category"), "카테고리를 선택하세요")
        description = require_non_empty(form.get("description"), "내용을 입력하세요")
        amount = require_positive_int(form.get("amount"), "금액은 1원 이상이어야 합니다")
        day = require_non_empty(form.get("date"), "날짜를 입력하세요")
        try:
            day = parse_iso_date(day).isoformat()
        except ValueError:
            raise ValidationError("날짜 형식이 올바르지 않습니다")
        return {"category": category, "description": description, "amount": amount, "date": day}

    def create(self, form: Mapping[str, str]) -> Optional[int]:
        return self._expenses.create(self._payload(form))

    def update(self, expense_id: int, form: Mapping[str, str]) -> None:
        self._expenses.update(int(expense_id), self._payload(form))

    def delete(self, expense_id: int) -> None:
        self._expenses.delete(int(expense_id))

    @staticmethod
    def totals_by_category(expenses: Sequence[Mapping]) -> list[tuple[str, int]]:
        """Sum amounts per category, largest first."""
        totals: dict[str, int] = {}
        for e in expenses:
            category = e.get("category") or "기타"
            try:
                amount = int(float(e.get("amount") or 0))
            except (TypeError, ValueError):
                amount = 0
            totals[category] = totals.get(category, 0) + amount
        return sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
