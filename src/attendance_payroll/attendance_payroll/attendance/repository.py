from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import RawAttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_period(self, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> int:
        """Insert or replace the record for (employee, date); returns its id."""

        raise NotImplementedError

    def update_punch_out(self, *, attendance_id: int, punch_out: time) -> bool:
        raise NotImplementedError

    def update_status(
        self,
        *,
        attendance_id: int,
        status: RawAttendanceStatus,
        leave_master_id: Optional[int] = None,
        admin_note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def mark_verified(self, *, attendance_id: int, admin_note: str) -> bool:
        """Flip unverified -> verified. Returns False when already verified."""

        raise NotImplementedError
