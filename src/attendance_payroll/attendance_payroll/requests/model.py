from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_master_id: int
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_at: Optional[datetime] = None
    admin_comment: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @staticmethod
    def span(start: date, end: date) -> Iterator[date]:
        day = start
        while day <= end:
            yield day
            day += timedelta(days=1)

    def days(self) -> Iterator[date]:
        return self.span(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "leave_master_id": self.leave_master_id,
            "from_date": self.start_date.strftime("%Y-%m-%d"),
            "to_date": self.end_date.strftime("%Y-%m-%d"),
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            "decided_at": self.decided_at.strftime("%Y-%m-%d %H:%M:%S") if self.decided_at else None,
            "admin_comment": self.admin_comment,
        }
