from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_punch_time
from ..common.money import to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AllowanceItem, Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: Dict[str, Any], allowances: Sequence[AllowanceItem]) -> Employee:
        return Employee(
            employee_id=int(r["employee_id"]),
            full_name=str(r["full_name"]),
            basic_salary=to_decimal(r.get("basic_salary")),
            duty_start=parse_punch_time(r.get("duty_start")),
            duty_end=parse_punch_time(r.get("duty_end")),
            allowances=tuple(allowances),
        )

    def _load(self, where: str, params: tuple) -> list[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, full_name, basic_salary, duty_start, duty_end
                FROM employees
                WHERE {where}
                ORDER BY full_name
                """,
                params,
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["employee_id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT employee_id, name, amount
                FROM employee_allowances
                WHERE employee_id IN ({placeholders})
                ORDER BY allowance_id
                """,
                tuple(ids),
            )
            allowances: dict[int, list[AllowanceItem]] = defaultdict(list)
            for a in fetchall(cur):
                allowances[int(a["employee_id"])].append(
                    AllowanceItem(name=str(a["name"]), amount=to_decimal(a["amount"]))
                )

            return [self._to_model(r, allowances[int(r["employee_id"])]) for r in rows]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        found = self._load("employee_id=%s", (int(employee_id),))
        return found[0] if found else None

    def list_active(self) -> Sequence[Employee]:
        return self._load("is_active=1", ())
