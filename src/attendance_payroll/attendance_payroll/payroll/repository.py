from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..employees.model import DeductionItem
from .model import PayrollSnapshot


class DeductionRepository(Protocol):
    def list_for_period(self, employee_id: int, *, year: int, month: int) -> Sequence[DeductionItem]:
        raise NotImplementedError


class PayrollSnapshotRepository(Protocol):
    def get_latest(self, employee_id: int, *, year: int, month: int) -> Optional[PayrollSnapshot]:
        """Most recent locked snapshot for the period, or None."""

        raise NotImplementedError

    def list_versions(self, employee_id: int, *, year: int, month: int) -> Sequence[PayrollSnapshot]:
        raise NotImplementedError

    def insert_locked(self, snapshot: PayrollSnapshot) -> int:
        """Persist a LOCKED snapshot.

        Must raise ConflictError when (employee, year, month, version) already exists.
        """

        raise NotImplementedError
