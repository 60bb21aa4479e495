from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import period_label
from ..core.constants import PAYSLIP_SCHEMA_VERSION
from ..employees.model import AllowanceItem, DeductionItem, Employee
from ..payroll.model import MonthlyBreakdown, PayrollSnapshot


@dataclass(frozen=True)
class PayslipSnapshot:
    """Read-only projection of a payroll snapshot handed to renderers.

    Carries no logic: every figure is copied from the PayrollSnapshot so a
    printer cannot alter what was computed or locked.
    """

    employee_id: int
    employee_name: str
    duty_start: Optional[time]
    duty_end: Optional[time]
    year: int
    month: int
    period: str
    basic_salary: Decimal
    prorated_basic: Decimal
    allowances: tuple[AllowanceItem, ...]
    deductions: tuple[DeductionItem, ...]
    total_allowances: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    attendance: MonthlyBreakdown
    locked: bool
    version: int
    schema_version: int = PAYSLIP_SCHEMA_VERSION

    @classmethod
    def from_payroll(cls, snapshot: PayrollSnapshot, employee: Employee) -> "PayslipSnapshot":
        return cls(
            employee_id=snapshot.employee_id,
            employee_name=employee.full_name,
            duty_start=employee.duty_start,
            duty_end=employee.duty_end,
            year=snapshot.year,
            month=snapshot.month,
            period=period_label(snapshot.year, snapshot.month),
            basic_salary=snapshot.basic_salary,
            prorated_basic=snapshot.prorated_basic,
            allowances=tuple(snapshot.allowances),
            deductions=tuple(snapshot.deductions),
            total_allowances=snapshot.total_allowances,
            total_deductions=snapshot.total_deductions,
            net_pay=snapshot.net_pay,
            attendance=snapshot.breakdown,
            locked=snapshot.locked,
            version=snapshot.version,
        )

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "version": self.version,
            "locked": self.locked,
            "employee": {
                "id": self.employee_id,
                "name": self.employee_name,
                "duty_start": self.duty_start.strftime("%H:%M") if self.duty_start else None,
                "duty_end": self.duty_end.strftime("%H:%M") if self.duty_end else None,
            },
            "period": {"year": self.year, "month": self.month, "label": self.period},
            "earnings": {
                "basic_salary": str(self.basic_salary),
                "prorated_basic": str(self.prorated_basic),
                "allowances": [{"name": a.name, "amount": str(a.amount)} for a in self.allowances],
                "total_allowances": str(self.total_allowances),
            },
            "deductions": {
                "items": [{"name": d.name, "amount": str(d.amount)} for d in self.deductions],
                "total": str(self.total_deductions),
            },
            "net_pay": str(self.net_pay),
            "attendance": self.attendance.to_dict(),
        }
