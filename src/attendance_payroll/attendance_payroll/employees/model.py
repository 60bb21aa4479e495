from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class AllowanceItem:
    name: str
    amount: Decimal


@dataclass(frozen=True)
class DeductionItem:
    """A deduction line. Upstream sources may store the amount as negative."""

    name: str
    amount: Decimal


@dataclass(frozen=True)
class Employee:
    """Salary profile of an employee, fixed for the duration of a payroll run."""

    employee_id: int
    full_name: str
    basic_salary: Decimal = Decimal("0")
    duty_start: Optional[time] = None
    duty_end: Optional[time] = None
    allowances: tuple[AllowanceItem, ...] = field(default_factory=tuple)
