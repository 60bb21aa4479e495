from __future__ import annotations

from decimal import Decimal

from ...common.money import quantize_money
from ..model import MonthlyBreakdown
from .base import PayrollCalculator


class ProratedPayrollCalculator(PayrollCalculator):
    """basic * effective_paid_days / total_working_days; full basic when there are no working days."""

    def basic_pay(self, basic_salary: Decimal, breakdown: MonthlyBreakdown) -> Decimal:
        if breakdown.total_working_days <= 0:
            return quantize_money(basic_salary)
        paid = Decimal(str(breakdown.effective_paid_days))
        return quantize_money(basic_salary * paid / Decimal(breakdown.total_working_days))
