from __future__ import annotations

from decimal import Decimal

from ...common.money import quantize_money
from ..model import MonthlyBreakdown
from .base import PayrollCalculator


class FlatPayrollCalculator(PayrollCalculator):
    """Full basic regardless of attendance (PRORATE_BASIC=False)."""

    def basic_pay(self, basic_salary: Decimal, breakdown: MonthlyBreakdown) -> Decimal:
        return quantize_money(basic_salary)
