from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from academy_console.core.exceptions import ApiError, ValidationError
from academy_console.payments.service import (
    DEFAULT_EXPENSE_CATEGORIES,
    ExpenseService,
    PaymentService,
    SalaryService,
)


@dataclass
class InMemoryPayments:
    created: list[dict] = field(default_factory=list)
    list_params: list[dict] = field(default_factory=list)

    def list(self, params=None):
        self.list_params.append(params)
        return []

    def get(self, payment_id):
        return None

    def create(self, data):
        self.created.append(data)
        return len(self.created)

    def update(self, payment_id, data):
        pass

    def delete(self, payment_id):
        pass

    def credits(self, params=None):
        return []


@dataclass
class InMemorySalaries:
    generated: list[dict] = field(default_factory=list)

    def list(self, params=None):
        return []

    def get(self, salary_id):
        return None

    def generate(self, data):
        self.generated.append(data)


@dataclass
class InMemoryExpenses:
    known_categories: Optional[list] = None
    created: list[dict] = field(default_factory=list)

    def list(self, params=None):
        return []

    def get_raw(self, expense_id):
        return None

    def create(self, data):
        self.created.append(data)
        return 1

    def update(self, expense_id, data):
        pass

    def delete(self, expense_id):
        pass

    def categories(self):
        if self.known_categories is None:
            raise ApiError("not supported", status_code=404)
        return self.known_categories


def test_payment_payload():
    payments = InMemoryPayments()

    PaymentService(payments).create({"student_id": "4", "month": "2026-10", "amount": "250000", "method": "card", "memo": ""})

    assert payments.created == [{"student_id": 4, "month": "2026-10", "amount": 250000, "method": "card"}]


@pytest.mark.parametrize(
    "form",
    [
        {"student_id": "", "month": "2026-10", "amount": "1000", "method": "cash"},
        {"student_id": "4", "month": "10월", "amount": "1000", "method": "cash"},
        {"student_id": "4", "month": "2026-10", "amount": "0", "method": "cash"},
        {"student_id": "4", "month": "2026-10", "amount": "1000", "method": "bitcoin"},
    ],
)
def test_payment_validation(form):
    with pytest.raises(ValidationError):
        PaymentService(InMemoryPayments()).create(form)


def test_payment_list_month_filter():
    payments = InMemoryPayments()
    service = PaymentService(payments)

    with pytest.raises(ValidationError):
        service.list(month="2026/10")

    service.list(month="2026-10", search=" ")
    assert payments.list_params[-1] == {"month": "2026-10", "student_id": None, "search": None}


def test_salary_generate_posts_year_month():
    salaries = InMemorySalaries()

    assert SalaryService(salaries).generate("2026-09") == "2026-09"
    assert salaries.generated == [{"year_month": "2026-09"}]

    with pytest.raises(ValidationError):
        SalaryService(salaries).generate("2026-9")


def test_expense_categories_fall_back_to_defaults():
    assert ExpenseService(InMemoryExpenses()).categories() == list(DEFAULT_EXPENSE_CATEGORIES)
    assert ExpenseService(InMemoryExpenses(known_categories=[])).categories() == list(DEFAULT_EXPENSE_CATEGORIES)
    assert ExpenseService(InMemoryExpenses(known_categories=["임대료"])).categories() == ["임대료"]


def test_expense_payload_normalizes_date():
    expenses = InMemoryExpenses()

    ExpenseService(expenses).create({"category": "임대료", "description": "10월 임대료", "amount": "1500000", "date": "2026-10-01T00:00:00"})

    assert expenses.created == [{"category": "임대료", "description": "10월 임대료", "amount": 1500000, "date": "2026-10-01"}]


def test_expense_totals_by_category():
    totals = ExpenseService.totals_by_category(
        [
            {"category": "임대료", "amount": 1500000},
            {"category": "소모품", "amount": "30000"},
            {"category": "소모품", "amount": 20000},
            {"category": "임대료", "amount": "500000.00"},
            {"amount": "n/a"},
        ]
    )

    assert totals == [("임대료", 2000000), ("소모품", 50000), ("기타", 0)]
