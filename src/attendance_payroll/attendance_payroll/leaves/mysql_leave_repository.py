from __future__ import annotations

from typing import Optional, Sequence

from ..attendance.normalizer import normalize_leave_master
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveMaster
from .repository import LeaveMasterRepository


class MySQLLeaveMasterRepository(LeaveMasterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[LeaveMaster]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_master_id, name, category, payment_status, is_active, fixed_date
                FROM leave_masters
                WHERE is_active=1
                ORDER BY leave_master_id
                """
            )
            return [normalize_leave_master(r) for r in fetchall(cur)]

    def get_by_id(self, leave_master_id: int) -> Optional[LeaveMaster]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_master_id, name, category, payment_status, is_active, fixed_date
                FROM leave_masters
                WHERE leave_master_id=%s
                """,
                (int(leave_master_id),),
            )
            r = fetchone(cur)
            return normalize_leave_master(r) if r else None
