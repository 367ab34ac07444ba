from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Payment, Salary


class PaymentRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, payment_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, payment_id: int) -> None:
        raise NotImplementedError

    def credits(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError


class SalaryRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get(self, salary_id: int) -> Optional[Salary]:
        raise NotImplementedError

    def generate(self, data: dict) -> None:
        raise NotImplementedError


class IncomeRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def summary(self, params: Optional[dict] = None) -> Optional[dict]:
        raise NotImplementedError


class ExpenseRepository(Protocol):
    def list(self, params: Optional[dict] = None) -> Sequence[dict]:
        raise NotImplementedError

    def get_raw(self, expense_id: int) -> Optional[dict]:
        raise NotImplementedError

    def create(self, data: dict) -> Optional[int]:
        raise NotImplementedError

    def update(self, expense_id: int, data: dict) -> None:
        raise NotImplementedError

    def delete(self, expense_id: int) -> None:
        raise NotImplementedError

    def categories(self) -> Sequence[str]:
        raise NotImplementedError
