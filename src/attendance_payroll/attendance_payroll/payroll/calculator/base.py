from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import MonthlyBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def basic_pay(self, basic_salary: Decimal, breakdown: MonthlyBreakdown) -> Decimal:
        raise NotImplementedError
