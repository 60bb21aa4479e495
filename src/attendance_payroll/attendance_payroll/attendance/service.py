from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import require_period
from ..core.enums import LeaveCategory, RawAttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.policy import PayrollPolicy
from ..employees.repository import EmployeeRepository
from ..leaves.catalog import LeaveCatalog
from ..leaves.repository import LeaveMasterRepository
from ..payroll.aggregator import MonthlyAttendanceAggregator
from .model import AttendanceRecord, CalendarDay
from .normalizer import normalize_attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Mutations of attendance records plus the resolved monthly calendar."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leave_masters: LeaveMasterRepository,
        *,
        aggregator: Optional[MonthlyAttendanceAggregator] = None,
        policy: Optional[PayrollPolicy] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leave_masters = leave_masters
        self._policy = policy or PayrollPolicy()
        self._aggregator = aggregator or MonthlyAttendanceAggregator(policy=self._policy)
        self._clock = clock

    def _catalog(self) -> LeaveCatalog:
        return LeaveCatalog(self._leave_masters.list_active(), entitlements=self._policy.leave_entitlements)

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError(f"Attendance record {attendance_id} does not exist")
        return record

    def punch_in(self, employee_id: int, *, now: Optional[datetime] = None) -> int:
        now = now or self._clock()
        today = now.date()
        self._require_employee(employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), today):
            raise ValidationError("Already punched in today")

        return self._attendance.create(
            AttendanceRecord(
                attendance_id=None,
                employee_id=int(employee_id),
                work_date=today,
                status=RawAttendanceStatus.FULL,
                punch_in=now.time().replace(microsecond=0),
            )
        )

    def punch_out(self, employee_id: int, *, now: Optional[datetime] = None) -> None:
        now = now or self._clock()
        record = self._attendance.get_for_employee_and_date(int(employee_id), now.date())
        if not record or not record.has_punch_in:
            raise ValidationError("No punch-in recorded today")
        if record.has_punch_out:
            raise ValidationError("Already punched out today")

        punch_out = now.time().replace(microsecond=0)
        if punch_out < record.punch_in:
            raise ValidationError("Punch-out cannot be earlier than punch-in")
        self._attendance.update_punch_out(attendance_id=record.attendance_id, punch_out=punch_out)

    def set_status(
        self,
        attendance_id: int,
        *,
        status: Any,
        leave_master_id: Optional[int] = None,
        admin_note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Admin edit of the raw status (and leave type) of one record."""
        record = self._require_record(attendance_id)

        raw = RawAttendanceStatus.parse(status)
        if raw == RawAttendanceStatus.OTHER:
            raise ValidationError(f"Unknown attendance status: {status!r}")

        if leave_master_id is not None and self._catalog().get(leave_master_id) is None:
            raise ValidationError(f"Leave type {leave_master_id} is not active")

        self._attendance.update_status(
            attendance_id=record.attendance_id,
            status=raw,
            leave_master_id=leave_master_id,
            admin_note=admin_note,
        )
        return self._require_record(attendance_id)

    def verify(self, attendance_id: int, *, admin_note: Optional[str] = None) -> AttendanceRecord:
        """One-way transition unverified -> verified."""
        record = self._require_record(attendance_id)
        if record.is_verified:
            raise ConflictError(f"Attendance record {attendance_id} is already verified")

        note = (admin_note or "").strip() or f"Verified on {self._clock():%Y-%m-%d %H:%M}"
        if not self._attendance.mark_verified(attendance_id=record.attendance_id, admin_note=note):
            raise ConflictError(f"Attendance record {attendance_id} is already verified")

        logger.info("Verified attendance record %s (employee %s, %s)", attendance_id, record.employee_id, record.work_date)
        return self._require_record(attendance_id)

    def import_records(self, payloads: Iterable[Mapping[str, Any]]) -> list[int]:
        """Normalize loosely-typed rows and upsert them.

        The whole batch is validated before anything is written.
        """
        records = [normalize_attendance(p) for p in payloads]

        seen = set()
        for r in records:
            key = (r.employee_id, r.work_date)
            if key in seen:
                raise ValidationError(f"Duplicate rows for employee {r.employee_id} on {r.work_date:%Y-%m-%d}")
            seen.add(key)

        return [self._attendance.upsert(r) for r in records]

    def apply_fixed_holidays(self, year: int, month: int) -> int:
        """Create holiday records for date-pinned leave masters on unmarked days."""
        year, month = require_period(year, month)
        start, end = month_bounds(year, month)
        holidays = self._catalog().fixed_holidays_between(start, end)
        if not holidays:
            return 0

        created = 0
        for employee in self._employees.list_active():
            for master in holidays:
                if self._attendance.get_for_employee_and_date(employee.employee_id, master.fixed_date):
                    continue
                status = (
                    RawAttendanceStatus.MANDATORY_HOLIDAY
                    if master.category == LeaveCategory.MANDATORY_HOLIDAY
                    else RawAttendanceStatus.SPECIAL_LEAVE
                )
                self._attendance.create(
                    AttendanceRecord(
                        attendance_id=None,
                        employee_id=employee.employee_id,
                        work_date=master.fixed_date,
                        status=status,
                        leave_master_id=master.leave_master_id,
                        admin_note=master.name,
                    )
                )
                created += 1

        logger.info("Applied %d fixed holiday records for %04d-%02d", created, year, month)
        return created

    def month_calendar(self, employee_id: int, year: int, month: int) -> list[CalendarDay]:
        year, month = require_period(year, month)
        self._require_employee(employee_id)
        start, end = month_bounds(year, month)
        records = self._attendance.list_for_employee(int(employee_id), start=start, end=end)

        return [
            CalendarDay(
                work_date=day,
                status=status,
                punch_in=record.punch_in if record else None,
                punch_out=record.punch_out if record else None,
            )
            for day, record, status in self._aggregator.resolve_month(
                records, self._catalog(), year, month, int(employee_id)
            )
        ]
