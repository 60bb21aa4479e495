from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

from ..core.enums import ResolvedDayStatus, SnapshotState
from ..core.exceptions import ConflictError
from ..employees.model import AllowanceItem, DeductionItem


@dataclass(frozen=True)
class LeaveCounter:
    taken_this_month: float = 0
    used_total_year: float = 0
    remaining_balance: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "taken_this_month": self.taken_this_month,
            "used_total_year": self.used_total_year,
            "remaining_balance": self.remaining_balance,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "LeaveCounter":
        return cls(
            taken_this_month=data.get("taken_this_month", 0),
            used_total_year=data.get("used_total_year", 0),
            remaining_balance=data.get("remaining_balance"),
        )


@dataclass(frozen=True)
class HolidayCounts:
    mandatory: int = 0
    special: int = 0
    # Weekday holidays recorded with raw status "holiday".
    declared: int = 0

    @property
    def excluded_from_working_days(self) -> int:
        return self.mandatory + self.special


@dataclass(frozen=True)
class MonthlyBreakdown:
    employee_id: int
    year: int
    month: int
    days_in_month: int
    sundays: int
    holidays: HolidayCounts
    full_days_worked: float
    half_days_worked: float
    wfh_days_worked: int
    open_shifts: int
    casual_leave: LeaveCounter
    sick_leave: LeaveCounter
    special_leave: LeaveCounter
    paid_leave_days: float
    unpaid_leave_days: float
    not_marked_days: int
    total_working_days: int
    effective_paid_days: float
    days_to_deduct: float
    attendance_percentage: float
    status_counts: Mapping[ResolvedDayStatus, int] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "year": self.year,
            "month": self.month,
            "days_in_month": self.days_in_month,
            "sundays": self.sundays,
            "holidays": {
                "mandatory": self.holidays.mandatory,
                "special": self.holidays.special,
                "declared": self.holidays.declared,
            },
            "full_days_worked": self.full_days_worked,
            "half_days_worked": self.half_days_worked,
            "wfh_days_worked": self.wfh_days_worked,
            "open_shifts": self.open_shifts,
            "casual_leave": self.casual_leave.to_dict(),
            "sick_leave": self.sick_leave.to_dict(),
            "special_leave": self.special_leave.to_dict(),
            "paid_leave_days": self.paid_leave_days,
            "unpaid_leave_days": self.unpaid_leave_days,
            "not_marked_days": self.not_marked_days,
            "total_working_days": self.total_working_days,
            "effective_paid_days": self.effective_paid_days,
            "days_to_deduct": self.days_to_deduct,
            "attendance_percentage": self.attendance_percentage,
            "status_counts": {k.value: v for k, v in self.status_counts.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "MonthlyBreakdown":
        holidays = data.get("holidays") or {}
        return cls(
            employee_id=int(data["employee_id"]),
            year=int(data["year"]),
            month=int(data["month"]),
            days_in_month=int(data["days_in_month"]),
            sundays=int(data["sundays"]),
            holidays=HolidayCounts(
                mandatory=int(holidays.get("mandatory", 0)),
                special=int(holidays.get("special", 0)),
                declared=int(holidays.get("declared", 0)),
            ),
            full_days_worked=data["full_days_worked"],
            half_days_worked=data["half_days_worked"],
            wfh_days_worked=int(data.get("wfh_days_worked", 0)),
            open_shifts=int(data.get("open_shifts", 0)),
            casual_leave=LeaveCounter.from_dict(data.get("casual_leave") or {}),
            sick_leave=LeaveCounter.from_dict(data.get("sick_leave") or {}),
            special_leave=LeaveCounter.from_dict(data.get("special_leave") or {}),
            paid_leave_days=data.get("paid_leave_days", 0),
            unpaid_leave_days=data.get("unpaid_leave_days", 0),
            not_marked_days=int(data.get("not_marked_days", 0)),
            total_working_days=int(data["total_working_days"]),
            effective_paid_days=data["effective_paid_days"],
            days_to_deduct=data["days_to_deduct"],
            attendance_percentage=data.get("attendance_percentage", 0),
            status_counts=MappingProxyType(
                {ResolvedDayStatus(k): int(v) for k, v in (data.get("status_counts") or {}).items()}
            ),
        )


# Allowed lifecycle moves. LOCKED has no outgoing edge.
_TRANSITIONS: dict[SnapshotState, frozenset[SnapshotState]] = {
    SnapshotState.PREVIEW: frozenset({SnapshotState.LOCKED}),
    SnapshotState.LOCKED: frozenset(),
}


@dataclass(frozen=True)
class PayrollSnapshot:
    """Payroll result for one employee and month.

    A PREVIEW is recomputed on every input change. A LOCKED snapshot comes
    verbatim from storage and its net pay is authoritative.
    """

    employee_id: int
    year: int
    month: int
    basic_salary: Decimal
    prorated_basic: Decimal
    allowances: tuple[AllowanceItem, ...]
    deductions: tuple[DeductionItem, ...]
    total_allowances: Decimal
    total_deductions: Decimal
    breakdown: MonthlyBreakdown
    net_pay: Decimal
    state: SnapshotState = SnapshotState.PREVIEW
    version: int = 0
    locked_at: Optional[datetime] = None
    anomalies: tuple[str, ...] = ()

    @property
    def locked(self) -> bool:
        return self.state == SnapshotState.LOCKED

    @property
    def key(self) -> tuple[int, int, int]:
        return self.employee_id, self.year, self.month

    def transition(self, target: SnapshotState, *, at: Optional[datetime] = None, version: Optional[int] = None) -> "PayrollSnapshot":
        if target not in _TRANSITIONS[self.state]:
            raise ConflictError(
                f"Payroll {self.employee_id}/{self.year}-{self.month:02d} cannot move from {self.state.value} to {target.value}"
            )
        return replace(
            self,
            state=target,
            locked_at=at if target == SnapshotState.LOCKED else None,
            version=self.version if version is None else int(version),
        )

    def lock(self, *, at: datetime, version: int = 1) -> "PayrollSnapshot":
        return self.transition(SnapshotState.LOCKED, at=at, version=version)

    def unlock(self) -> "PayrollSnapshot":
        return self.transition(SnapshotState.PREVIEW)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "year": self.year,
            "month": self.month,
            "basic_salary": str(self.basic_salary),
            "prorated_basic": str(self.prorated_basic),
            "allowances": [{"name": a.name, "amount": str(a.amount)} for a in self.allowances],
            "deductions": [{"name": d.name, "amount": str(d.amount)} for d in self.deductions],
            "total_allowances": str(self.total_allowances),
            "total_deductions": str(self.total_deductions),
            "net_pay": str(self.net_pay),
            "state": self.state.value,
            "locked": self.locked,
            "version": self.version,
            "locked_at": self.locked_at.isoformat() if self.locked_at else None,
            "anomalies": list(self.anomalies),
            "attendance": self.breakdown.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "PayrollSnapshot":
        locked_at = data.get("locked_at")
        return cls(
            employee_id=int(data["employee_id"]),
            year=int(data["year"]),
            month=int(data["month"]),
            basic_salary=Decimal(str(data["basic_salary"])),
            prorated_basic=Decimal(str(data["prorated_basic"])),
            allowances=tuple(AllowanceItem(name=a["name"], amount=Decimal(str(a["amount"]))) for a in data.get("allowances") or ()),
            deductions=tuple(DeductionItem(name=d["name"], amount=Decimal(str(d["amount"]))) for d in data.get("deductions") or ()),
            total_allowances=Decimal(str(data["total_allowances"])),
            total_deductions=Decimal(str(data["total_deductions"])),
            breakdown=MonthlyBreakdown.from_dict(data["attendance"]),
            net_pay=Decimal(str(data["net_pay"])),
            state=SnapshotState(data.get("state", SnapshotState.PREVIEW.value)),
            version=int(data.get("version", 0)),
            locked_at=datetime.fromisoformat(locked_at) if isinstance(locked_at, str) else locked_at,
            anomalies=tuple(data.get("anomalies") or ()),
        )
