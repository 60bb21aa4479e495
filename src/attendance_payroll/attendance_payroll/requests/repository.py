from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_master_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``. Returns False when it was no longer pending."""

        raise NotImplementedError
