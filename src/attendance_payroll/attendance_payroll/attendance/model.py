from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import RawAttendanceStatus, ResolvedDayStatus, VerificationStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Canonical attendance row: one per employee per calendar date."""

    attendance_id: Optional[int]
    employee_id: int
    work_date: date
    status: RawAttendanceStatus
    punch_in: Optional[time] = None
    punch_out: Optional[time] = None
    verification: VerificationStatus = VerificationStatus.UNVERIFIED
    leave_master_id: Optional[int] = None
    admin_note: Optional[str] = None

    @property
    def has_punch_in(self) -> bool:
        return self.punch_in is not None

    @property
    def has_punch_out(self) -> bool:
        return self.punch_out is not None

    @property
    def is_verified(self) -> bool:
        return self.verification == VerificationStatus.VERIFIED


@dataclass(frozen=True)
class CalendarDay:
    """Read-model for the monthly attendance grid."""

    work_date: date
    status: ResolvedDayStatus
    punch_in: Optional[time] = None
    punch_out: Optional[time] = None

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "punch_in": self.punch_in.strftime("%H:%M") if self.punch_in else None,
            "punch_out": self.punch_out.strftime("%H:%M") if self.punch_out else None,
        }
