from __future__ import annotations

from typing import Optional, Sequence

from ..api.http_base import HttpRepository, as_int, as_str, unwrap_item, unwrap_list
from ..core.enums import PaymentMethod
from .model import Payment, Salary
from .repository import ExpenseRepository, IncomeRepository, PaymentRepository, SalaryRepository


class HttpPaymentRepository(HttpRepository, PaymentRepository):
    base_path = "/payments"

    def get(self, payment_id: int) -> Optional[Payment]:
        r = self.get_raw(payment_id)
        if not r:
            return None
        try:
            method = PaymentMethod(r.get("method"))
        except ValueError:
            method = PaymentMethod.CASH
        return Payment(
            payment_id=as_int(r.get("id")),
            student_id=as_int(r.get("student_id")),
            student_name=r.get("student_name") or "",
            month=str(r.get("month") or ""),
            amount=as_int(r.get("amount")),
            method=method,
            paid_at=as_str(r.get("paid_at") or r.get("created_at")),
            memo=r.get("memo"),
        )

    def credits(self, params: Optional[dict] = None) -> Sequence[dict]:
        return unwrap_list(self._client.get(self._path("credits"), params=params))


class HttpSalaryRepository(HttpRepository, SalaryRepository):
    base_path = "/salaries"

    def get(self, salary_id: int) -> Optional[Salary]:
        r = self.get_raw(salary_id)
        if not r:
            return None
        return Salary(
            salary_id=as_int(r.get("id")),
            instructor_id=as_int(r.get("instructor_id")),
            instructor_name=r.get("instructor_name") or "",
            year_month=str(r.get("year_month") or r.get("month") or ""),
            base_amount=as_int(r.get("base_amount")),
            overtime_amount=as_int(r.get("overtime_amount")),
            deduction=as_int(r.get("deduction")),
            total_amount=as_int(r.get("total_amount")),
            status=r.get("status"),
        )

    def generate(self, data: dict) -> None:
        self._client.post(self._path("generate"), data)


class HttpIncomeRepository(HttpRepository, IncomeRepository):
    base_path = "/incomes"

    def summary(self, params: Optional[dict] = None) -> Optional[dict]:
        return unwrap_item(self._client.get(self._path("summary"), params=params))


class HttpExpenseRepository(HttpRepository, ExpenseRepository):
    base_path = "/expenses"

    def categories(self) -> Sequence[str]:
        payload = self._client.get(self._path("categories"))
        items = payload if isinstance(payload, list) else unwrap_list(payload)
        out = []
        for item in items:
            if isinstance(item, dict):
                item = item.get("name") or item.get("category")
            if item:
                out.append(str(item))
        return out
