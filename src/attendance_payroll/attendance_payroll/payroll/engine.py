from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from ..common.money import quantize_money, to_decimal
from ..core.constants import (
    ANOMALY_MISSING_BASIC_SALARY,
    ANOMALY_NEGATIVE_NET_PAY,
    ANOMALY_OPEN_SHIFTS,
    ANOMALY_UNMARKED_DAYS,
)
from ..core.enums import SnapshotState
from ..core.exceptions import ValidationError
from ..core.policy import PayrollPolicy
from ..employees.model import AllowanceItem, DeductionItem, Employee
from .calculator.base import PayrollCalculator
from .calculator.flat_calculator import FlatPayrollCalculator
from .calculator.prorated_calculator import ProratedPayrollCalculator
from .model import MonthlyBreakdown, PayrollSnapshot


class PayrollAccrualEngine:
    """Turn a MonthlyBreakdown and salary components into a PayrollSnapshot.

    The engine only ever produces PREVIEW snapshots. Locking happens in the
    save operation (PayrollService.save); a locked snapshot handed back in as
    ``existing`` is returned untouched.
    """

    def __init__(self, calculator: Optional[PayrollCalculator] = None):
        self._calculator = calculator or ProratedPayrollCalculator()

    @classmethod
    def for_policy(cls, policy: PayrollPolicy) -> "PayrollAccrualEngine":
        calculator = ProratedPayrollCalculator() if policy.prorate_basic else FlatPayrollCalculator()
        return cls(calculator)

    def accrue(
        self,
        employee: Employee,
        breakdown: MonthlyBreakdown,
        allowances: Optional[Iterable[AllowanceItem]] = None,
        deductions: Optional[Iterable[DeductionItem]] = None,
        existing: Optional[PayrollSnapshot] = None,
    ) -> PayrollSnapshot:
        if existing is not None and existing.locked:
            return existing

        if breakdown.employee_id != employee.employee_id:
            raise ValidationError(
                f"Breakdown belongs to employee {breakdown.employee_id}, not {employee.employee_id}"
            )

        allowances = tuple(allowances or ())
        deductions = tuple(deductions or ())

        basic = to_decimal(employee.basic_salary)
        prorated_basic = self._calculator.basic_pay(basic, breakdown)
        # Upstream sources store some deductions as negative numbers.
        total_allowances = quantize_money(sum((abs(to_decimal(a.amount)) for a in allowances), Decimal("0")))
        total_deductions = quantize_money(sum((abs(to_decimal(d.amount)) for d in deductions), Decimal("0")))
        net_pay = prorated_basic + total_allowances - total_deductions

        return PayrollSnapshot(
            employee_id=employee.employee_id,
            year=breakdown.year,
            month=breakdown.month,
            basic_salary=quantize_money(basic),
            prorated_basic=prorated_basic,
            allowances=allowances,
            deductions=deductions,
            total_allowances=total_allowances,
            total_deductions=total_deductions,
            breakdown=breakdown,
            net_pay=net_pay,
            state=SnapshotState.PREVIEW,
            version=existing.version if existing is not None else 0,
            anomalies=self._anomalies(basic, net_pay, breakdown),
        )

    @staticmethod
    def _anomalies(basic: Decimal, net_pay: Decimal, breakdown: MonthlyBreakdown) -> tuple[str, ...]:
        found = []
        if basic <= 0:
            found.append(ANOMALY_MISSING_BASIC_SALARY)
        if net_pay < 0:
            found.append(ANOMALY_NEGATIVE_NET_PAY)
        if breakdown.open_shifts:
            found.append(ANOMALY_OPEN_SHIFTS)
        if breakdown.not_marked_days:
            found.append(ANOMALY_UNMARKED_DAYS)
        return tuple(found)
