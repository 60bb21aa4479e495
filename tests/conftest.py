from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.core.enums import (
    LeaveCategory,
    PaymentStatus,
    RawAttendanceStatus,
    RequestStatus,
    VerificationStatus,
)
from src.attendance_payroll.attendance_payroll.core.exceptions import ConflictError, ValidationError
from src.attendance_payroll.attendance_payroll.employees.model import AllowanceItem, DeductionItem, Employee
from src.attendance_payroll.attendance_payroll.leaves.model import LeaveMaster
from src.attendance_payroll.attendance_payroll.payroll.model import PayrollSnapshot
from src.attendance_payroll.attendance_payroll.requests.model import LeaveRequest

CASUAL = 1
SICK = 2
SPECIAL = 3
UNPAID = 4
MANDATORY = 5


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def list_active(self):
        return list(self.employees.values())


@dataclass
class InMemoryLeaveMasters:
    masters: list[LeaveMaster]

    def list_active(self):
        return [m for m in self.masters if m.is_active]

    def get_by_id(self, leave_master_id: int) -> Optional[LeaveMaster]:
        return next((m for m in self.masters if m.leave_master_id == leave_master_id), None)


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _find(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._by_id.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._find(employee_id, work_date)

    def list_for_employee(self, employee_id: int, *, start: date, end: date):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id and start <= r.work_date <= end]
        return sorted(items, key=lambda r: r.work_date)

    def list_for_period(self, *, start: date, end: date):
        items = [r for r in self._by_id.values() if start <= r.work_date <= end]
        return sorted(items, key=lambda r: (r.employee_id, r.work_date))

    def create(self, record: AttendanceRecord) -> int:
        if self._find(record.employee_id, record.work_date):
            raise ConflictError("duplicate attendance record")
        self._id += 1
        self._by_id[self._id] = replace(record, attendance_id=self._id)
        return self._id

    def upsert(self, record: AttendanceRecord) -> int:
        current = self._find(record.employee_id, record.work_date)
        if current is None:
            return self.create(record)
        verification = VerificationStatus.VERIFIED if current.is_verified else record.verification
        self._by_id[current.attendance_id] = replace(
            record,
            attendance_id=current.attendance_id,
            verification=verification,
            admin_note=record.admin_note if record.admin_note is not None else current.admin_note,
        )
        return current.attendance_id

    def update_punch_out(self, *, attendance_id: int, punch_out: time) -> bool:
        self._by_id[attendance_id] = replace(self._by_id[attendance_id], punch_out=punch_out)
        return True

    def update_status(self, *, attendance_id: int, status, leave_master_id=None, admin_note=None) -> bool:
        current = self._by_id[attendance_id]
        self._by_id[attendance_id] = replace(
            current,
            status=status,
            leave_master_id=leave_master_id,
            admin_note=admin_note if admin_note is not None else current.admin_note,
        )
        return True

    def mark_verified(self, *, attendance_id: int, admin_note: str) -> bool:
        current = self._by_id[attendance_id]
        if current.is_verified:
            return False
        self._by_id[attendance_id] = replace(current, verification=VerificationStatus.VERIFIED, admin_note=admin_note)
        return True


@dataclass
class InMemoryDeductions:
    items: dict[tuple[int, int, int], list[DeductionItem]] = field(default_factory=dict)

    def list_for_period(self, employee_id: int, *, year: int, month: int):
        return list(self.items.get((employee_id, year, month), []))


class InMemorySnapshots:
    def __init__(self):
        self.rows: list[PayrollSnapshot] = []

    def _matching(self, employee_id: int, year: int, month: int):
        items = [s for s in self.rows if s.key == (employee_id, year, month)]
        return sorted(items, key=lambda s: s.version)

    def get_latest(self, employee_id: int, *, year: int, month: int) -> Optional[PayrollSnapshot]:
        items = self._matching(employee_id, year, month)
        return items[-1] if items else None

    def list_versions(self, employee_id: int, *, year: int, month: int):
        return self._matching(employee_id, year, month)

    def insert_locked(self, snapshot: PayrollSnapshot) -> int:
        if not snapshot.locked:
            raise ValidationError("Only locked payroll snapshots can be stored")
        if any(s.version == snapshot.version for s in self._matching(*snapshot.key)):
            raise ConflictError("duplicate payroll version")
        # Stored as JSON in MySQL; keep the same round trip here.
        self.rows.append(PayrollSnapshot.from_dict(snapshot.to_dict()))
        return len(self.rows)


class InMemoryLeaveRequests:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}

    def create(self, *, employee_id, leave_master_id, start_date, end_date, reason, created_at) -> int:
        request_id = len(self.rows) + 1
        self.rows[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=employee_id,
            leave_master_id=leave_master_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )
        return request_id

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(request_id)

    def list_requests(self, *, status=None, employee_id=None, limit=200):
        items = [
            r
            for r in self.rows.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        return sorted(items, key=lambda r: (r.created_at, r.request_id), reverse=True)[:limit]

    def decide(self, *, request_id, status, decided_at, admin_comment=None) -> bool:
        current = self.rows.get(request_id)
        if current is None or not current.is_pending:
            return False
        self.rows[request_id] = replace(current, status=status, decided_at=decided_at, admin_comment=admin_comment)
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 4, 10, 9, 0, 0)


@pytest.fixture
def leave_masters() -> list[LeaveMaster]:
    return [
        LeaveMaster(CASUAL, "Casual Leave", LeaveCategory.CASUAL, PaymentStatus.PAID),
        LeaveMaster(SICK, "Sick Leave", LeaveCategory.SICK, PaymentStatus.PAID),
        LeaveMaster(SPECIAL, "Special Leave", LeaveCategory.SPECIAL, PaymentStatus.PAID),
        LeaveMaster(UNPAID, "Unpaid Leave", LeaveCategory.UNPAID, PaymentStatus.UNPAID),
        LeaveMaster(
            MANDATORY,
            "Founders Day",
            LeaveCategory.MANDATORY_HOLIDAY,
            PaymentStatus.PAID,
            fixed_date=date(2024, 4, 15),
        ),
    ]


@pytest.fixture
def employee() -> Employee:
    return Employee(
        employee_id=1,
        full_name="An Tran",
        basic_salary=Decimal("30000"),
        duty_start=time(9, 0),
        duty_end=time(18, 0),
        allowances=(AllowanceItem("Transport", Decimal("2000")),),
    )


@pytest.fixture
def make_record():
    def _make(
        day: date,
        status=RawAttendanceStatus.FULL,
        *,
        employee_id: int = 1,
        punch_in: Optional[time] = time(9, 0),
        punch_out: Optional[time] = time(18, 0),
        verified: bool = False,
        leave_master_id: Optional[int] = None,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=None,
            employee_id=employee_id,
            work_date=day,
            status=RawAttendanceStatus.parse(status),
            punch_in=punch_in,
            punch_out=punch_out,
            verification=VerificationStatus.VERIFIED if verified else VerificationStatus.UNVERIFIED,
            leave_master_id=leave_master_id,
        )

    return _make


@pytest.fixture
def repos(employee, leave_masters):
    return SimpleNamespace(
        employees=InMemoryEmployees({employee.employee_id: employee}),
        attendance=InMemoryAttendance(),
        leave_masters=InMemoryLeaveMasters(list(leave_masters)),
        deductions=InMemoryDeductions({(employee.employee_id, 2024, 4): [DeductionItem("Tax", Decimal("-500"))]}),
        snapshots=InMemorySnapshots(),
        leave_requests=InMemoryLeaveRequests(),
    )
