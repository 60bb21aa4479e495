from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import LeaveCategory, PaymentStatus


@dataclass(frozen=True)
class LeaveMaster:
    """Reference data: one leave type with its category and payment policy."""

    leave_master_id: int
    name: str
    category: LeaveCategory
    payment: PaymentStatus
    is_active: bool = True
    fixed_date: Optional[date] = None

    @property
    def is_paid(self) -> bool:
        return self.payment == PaymentStatus.PAID and self.category != LeaveCategory.UNPAID
