from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import RawAttendanceStatus, VerificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .normalizer import normalize_attendance
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, status, punch_in, punch_out,
    verification_status, leave_master_id, admin_note
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return normalize_attendance(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return normalize_attendance(r) if r else None

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start, end),
            )
            return [normalize_attendance(r) for r in fetchall(cur)]

    def list_for_period(self, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date BETWEEN %s AND %s
                ORDER BY employee_id, work_date
                """,
                (start, end),
            )
            return [normalize_attendance(r) for r in fetchall(cur)]

    @staticmethod
    def _params(record: AttendanceRecord) -> tuple:
        return (
            record.employee_id,
            record.work_date,
            record.status.value,
            record.punch_in,
            record.punch_out,
            record.verification.value,
            record.leave_master_id,
            record.admin_note,
        )

    def create(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, status, punch_in, punch_out,
                    verification_status, leave_master_id, admin_note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                self._params(record),
            )
            return int(cur.lastrowid)

    def upsert(self, record: AttendanceRecord) -> int:
        # A verified record stays verified even if the incoming row says otherwise.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, status, punch_in, punch_out,
                    verification_status, leave_master_id, admin_note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    punch_in=VALUES(punch_in),
                    punch_out=VALUES(punch_out),
                    verification_status=IF(verification_status='verified', 'verified', VALUES(verification_status)),
                    leave_master_id=VALUES(leave_master_id),
                    admin_note=COALESCE(VALUES(admin_note), admin_note)
                """,
                self._params(record),
            )
            return int(cur.lastrowid)

    def update_punch_out(self, *, attendance_id: int, punch_out: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET punch_out=%s WHERE attendance_id=%s",
                (punch_out, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_status(
        self,
        *,
        attendance_id: int,
        status: RawAttendanceStatus,
        leave_master_id: Optional[int] = None,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, leave_master_id=%s, admin_note=COALESCE(%s, admin_note)
                WHERE attendance_id=%s
                """,
                (status.value, leave_master_id, admin_note, int(attendance_id)),
            )
            return cur.rowcount > 0

    def mark_verified(self, *, attendance_id: int, admin_note: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET verification_status=%s, admin_note=%s
                WHERE attendance_id=%s AND verification_status=%s
                """,
                (
                    VerificationStatus.VERIFIED.value,
                    admin_note,
                    int(attendance_id),
                    VerificationStatus.UNVERIFIED.value,
                ),
            )
            return cur.rowcount > 0
