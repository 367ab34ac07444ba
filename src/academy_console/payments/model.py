from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PaymentMethod


@dataclass(frozen=True)
class Payment:
    payment_id: int
    student_id: int
    student_name: str
    month: str
    amount: int
    method: PaymentMethod
    paid_at: Optional[str] = None
    memo: Optional[str] = None


@dataclass(frozen=True)
class Salary:
    """Monthly salary statement of one instructor."""

    salary_id: int
    instructor_id: int
    instructor_name: str
    year_month: str
    base_amount: int = 0
    overtime_amount: int = 0
    deduction: int = 0
    total_amount: int = 0
    status: Optional[str] = None

    @property
    def net_amount(self) -> int:
        return self.total_amount or (self.base_amount + self.overtime_amount - self.deduction)
