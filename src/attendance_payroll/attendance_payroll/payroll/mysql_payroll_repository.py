from __future__ import annotations

import json
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..employees.model import DeductionItem
from .model import PayrollSnapshot
from .repository import DeductionRepository, PayrollSnapshotRepository


class MySQLDeductionRepository(DeductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_period(self, employee_id: int, *, year: int, month: int) -> Sequence[DeductionItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT name, amount
                FROM employee_deductions
                WHERE employee_id=%s AND year=%s AND month=%s
                ORDER BY deduction_id
                """,
                (int(employee_id), int(year), int(month)),
            )
            return [DeductionItem(name=str(r["name"]), amount=to_decimal(r["amount"])) for r in fetchall(cur)]


class MySQLPayrollSnapshotRepository(PayrollSnapshotRepository):
    """Locked snapshots stored verbatim as JSON; rows are never updated."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _from_row(r) -> PayrollSnapshot:
        payload = r["payload"]
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        return PayrollSnapshot.from_dict(json.loads(payload) if isinstance(payload, str) else payload)

    def get_latest(self, employee_id: int, *, year: int, month: int) -> Optional[PayrollSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM payroll_snapshots
                WHERE employee_id=%s AND year=%s AND month=%s
                ORDER BY version DESC
                LIMIT 1
                """,
                (int(employee_id), int(year), int(month)),
            )
            r = fetchone(cur)
            return self._from_row(r) if r else None

    def list_versions(self, employee_id: int, *, year: int, month: int) -> Sequence[PayrollSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payload
                FROM payroll_snapshots
                WHERE employee_id=%s AND year=%s AND month=%s
                ORDER BY version
                """,
                (int(employee_id), int(year), int(month)),
            )
            return [self._from_row(r) for r in fetchall(cur)]

    def insert_locked(self, snapshot: PayrollSnapshot) -> int:
        if not snapshot.locked:
            raise ValidationError("Only locked payroll snapshots can be stored")

        # Duplicate (employee, year, month, version) surfaces as ConflictError from db_cursor.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_snapshots(employee_id, year, month, version, net_pay, locked_at, payload)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    snapshot.employee_id,
                    snapshot.year,
                    snapshot.month,
                    snapshot.version,
                    to_decimal(snapshot.net_pay),
                    snapshot.locked_at,
                    json.dumps(snapshot.to_dict()),
                ),
            )
            return int(cur.lastrowid)
