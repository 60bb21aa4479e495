from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_period
from ..core.exceptions import ConflictError, NotFoundError
from ..core.policy import PayrollPolicy
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leaves.catalog import LeaveCatalog
from ..leaves.repository import LeaveMasterRepository
from ..payslip.model import PayslipSnapshot
from .aggregator import MonthlyAttendanceAggregator
from .engine import PayrollAccrualEngine
from .model import MonthlyBreakdown, PayrollSnapshot
from .repository import DeductionRepository, PayrollSnapshotRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class PayrollService:
    """Preview, save and supersede monthly payroll.

    Callers must serialize save/supersede for the same employee and month;
    the storage unique key is the last line of defence.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leave_masters: LeaveMasterRepository,
        deductions: DeductionRepository,
        snapshots: PayrollSnapshotRepository,
        *,
        policy: Optional[PayrollPolicy] = None,
        aggregator: Optional[MonthlyAttendanceAggregator] = None,
        engine: Optional[PayrollAccrualEngine] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leave_masters = leave_masters
        self._deductions = deductions
        self._snapshots = snapshots
        self._policy = policy or PayrollPolicy()
        self._aggregator = aggregator or MonthlyAttendanceAggregator(policy=self._policy)
        self._engine = engine or PayrollAccrualEngine.for_policy(self._policy)
        self._clock = clock

    def _catalog(self) -> LeaveCatalog:
        return LeaveCatalog(self._leave_masters.list_active(), entitlements=self._policy.leave_entitlements)

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def breakdown(self, employee: Employee, year: int, month: int) -> MonthlyBreakdown:
        year, month = require_period(year, month)
        _, end = month_bounds(year, month)
        # Year-to-date rows feed the leave balances; the aggregator keeps only this month for day counts.
        records = list(self._attendance.list_for_employee(employee.employee_id, start=date(year, 1, 1), end=end))
        return self._aggregator.aggregate(records, self._catalog(), year, month, employee, year_records=records)

    def preview(self, employee_id: int, year: int, month: int, *, fresh: bool = False) -> PayrollSnapshot:
        """Current payroll for the period.

        Returns the stored locked snapshot when there is one, unless ``fresh``
        asks for a recomputed preview (e.g. to compare before superseding).
        """
        year, month = require_period(year, month)
        employee = self._require_employee(employee_id)
        if not fresh:
            existing = self._snapshots.get_latest(employee.employee_id, year=year, month=month)
            # Locked snapshots never read current attendance.
            if existing is not None and existing.locked:
                return existing

        return self._engine.accrue(
            employee,
            self.breakdown(employee, year, month),
            allowances=employee.allowances,
            deductions=self._deductions.list_for_period(employee.employee_id, year=year, month=month),
        )

    def save(self, employee_id: int, year: int, month: int) -> PayrollSnapshot:
        """Lock the current preview. A period can only be saved once."""
        year, month = require_period(year, month)
        current = self._snapshots.get_latest(int(employee_id), year=year, month=month)
        if current is not None:
            raise ConflictError(
                f"Payroll for employee {employee_id} {year}-{month:02d} is already locked (version {current.version})"
            )

        locked = self.preview(employee_id, year, month, fresh=True).lock(at=self._clock(), version=1)
        self._snapshots.insert_locked(locked)
        logger.info("Locked payroll employee=%s period=%04d-%02d net=%s", employee_id, year, month, locked.net_pay)
        return locked

    def supersede(self, employee_id: int, year: int, month: int, *, expected_version: int) -> PayrollSnapshot:
        """Replace the locked snapshot with a new locked version computed from current inputs."""
        year, month = require_period(year, month)
        current = self._snapshots.get_latest(int(employee_id), year=year, month=month)
        if current is None:
            raise NotFoundError(f"No locked payroll for employee {employee_id} {year}-{month:02d}; save it first")
        if current.version != int(expected_version):
            raise ConflictError(
                f"Payroll version is {current.version}, not {expected_version}; reload before superseding"
            )

        locked = self.preview(employee_id, year, month, fresh=True).lock(at=self._clock(), version=current.version + 1)
        self._snapshots.insert_locked(locked)
        logger.info(
            "Superseded payroll employee=%s period=%04d-%02d v%d -> v%d net=%s",
            employee_id,
            year,
            month,
            current.version,
            locked.version,
            locked.net_pay,
        )
        return locked

    def history(self, employee_id: int, year: int, month: int) -> list[PayrollSnapshot]:
        year, month = require_period(year, month)
        return list(self._snapshots.list_versions(int(employee_id), year=year, month=month))

    def payslip(self, employee_id: int, year: int, month: int) -> PayslipSnapshot:
        employee = self._require_employee(employee_id)
        return PayslipSnapshot.from_payroll(self.preview(employee.employee_id, year, month), employee)

    def monthly_summary(self, year: int, month: int) -> ReportData:
        """Attendance overview of every active employee for one month."""
        year, month = require_period(year, month)
        start, end = month_bounds(year, month)
        catalog = self._catalog()
        records = list(self._attendance.list_for_period(start=start, end=end))

        employees = sorted(self._employees.list_active(), key=lambda e: (e.full_name or "").lower())
        roster = {e.employee_id for e in employees}

        rows = []
        for employee in employees:
            b = self._aggregator.aggregate(records, catalog, year, month, employee)
            rows.append(
                {
                    "employee_id": employee.employee_id,
                    "full_name": employee.full_name,
                    "full_days": b.full_days_worked,
                    "half_days": b.half_days_worked,
                    "paid_leave_days": b.paid_leave_days,
                    "unpaid_leave_days": b.unpaid_leave_days,
                    "not_marked_days": b.not_marked_days,
                    "total_working_days": b.total_working_days,
                    "effective_paid_days": b.effective_paid_days,
                    "attendance_percentage": b.attendance_percentage,
                }
            )

        average = round(sum(r["attendance_percentage"] for r in rows) / len(rows), 1) if rows else 0
        summary = {
            "year": year,
            "month": month,
            "total_employees": len(rows),
            "average_attendance": average,
            # Records pointing at employees missing from the active roster.
            "unknown_employee_ids": sorted({r.employee_id for r in records} - roster),
        }
        return ReportData(rows=rows, summary=summary)
