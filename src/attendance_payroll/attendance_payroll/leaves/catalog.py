from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..core.enums import LeaveCategory
from .model import LeaveMaster


class LeaveCatalog:
    """Queryable view over active leave masters plus yearly entitlements."""

    def __init__(self, masters: Iterable[LeaveMaster], *, entitlements: Optional[Mapping[str, int]] = None):
        self._by_id: dict[int, LeaveMaster] = {m.leave_master_id: m for m in masters if m.is_active}
        self._entitlements = dict(entitlements or {})

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())

    def get(self, leave_master_id: Optional[int]) -> Optional[LeaveMaster]:
        if leave_master_id is None:
            return None
        return self._by_id.get(int(leave_master_id))

    def by_category(self, category: LeaveCategory) -> list[LeaveMaster]:
        return [m for m in self._by_id.values() if m.category == category]

    def is_paid(self, leave_master_id: Optional[int]) -> bool:
        master = self.get(leave_master_id)
        return bool(master and master.is_paid)

    def entitlement(self, category: LeaveCategory) -> Optional[int]:
        value = self._entitlements.get(category.value)
        return None if value is None else int(value)

    def fixed_holidays_between(self, start: date, end: date) -> list[LeaveMaster]:
        """Holiday masters pinned to a date inside [start, end]."""
        return sorted(
            (
                m
                for m in self._by_id.values()
                if m.fixed_date is not None
                and start <= m.fixed_date <= end
                and m.category in (LeaveCategory.MANDATORY_HOLIDAY, LeaveCategory.SPECIAL)
            ),
            key=lambda m: m.fixed_date,
        )
