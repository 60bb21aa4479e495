from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import LeaveCategory, RawAttendanceStatus, RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.policy import PayrollPolicy
from ..employees.repository import EmployeeRepository
from ..leaves.model import LeaveMaster
from ..leaves.repository import LeaveMasterRepository
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveRequestService:
    """Employee leave requests and their one-way admin review.

    Approving a request writes one ``leave`` attendance record per working day
    of the range, pointing at the requested leave type.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leave_masters: LeaveMasterRepository,
        *,
        policy: Optional[PayrollPolicy] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._attendance = attendance
        self._employees = employees
        self._leave_masters = leave_masters
        self._policy = policy or PayrollPolicy()
        self._clock = clock

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} does not exist")
        return req

    def _require_leave_master(self, leave_master_id: int) -> LeaveMaster:
        master = self._leave_masters.get_by_id(int(leave_master_id))
        if master is None or not master.is_active:
            raise ValidationError(f"Leave type {leave_master_id} is not active")
        if master.category == LeaveCategory.MANDATORY_HOLIDAY:
            raise ValidationError(f"{master.name} is a company holiday and cannot be requested")
        return master

    def _working_days(self, req: LeaveRequest) -> list[date]:
        return [d for d in req.days() if d.weekday() != self._policy.weekly_rest_day]

    def submit(
        self,
        *,
        employee_id: int,
        leave_master_id: int,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError(f"Employee {employee_id} does not exist")
        if end_date < start_date:
            raise ValidationError("to_date must not be earlier than from_date")

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("reason is required")

        self._require_leave_master(leave_master_id)
        if all(d.weekday() == self._policy.weekly_rest_day for d in LeaveRequest.span(start_date, end_date)):
            raise ValidationError("Leave request covers no working days")

        request_id = self._requests.create(
            employee_id=int(employee_id),
            leave_master_id=int(leave_master_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            created_at=self._clock(),
        )
        logger.info(
            "Leave request %s submitted employee=%s %s..%s", request_id, employee_id, start_date, end_date
        )
        return request_id

    def list_requests(
        self,
        *,
        status: Any = None,
        employee_id: Optional[int] = None,
    ) -> list[LeaveRequest]:
        parsed = self._parse_status(status) if status not in (None, "") else None
        return list(self._requests.list_requests(status=parsed, employee_id=employee_id))

    @staticmethod
    def _parse_status(value: Any) -> RequestStatus:
        try:
            return RequestStatus(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown request status: {value!r}")

    def _decide(self, req: LeaveRequest, status: RequestStatus, admin_comment: Optional[str]) -> None:
        ok = self._requests.decide(
            request_id=req.request_id,
            status=status,
            decided_at=self._clock(),
            admin_comment=(admin_comment or "").strip() or None,
        )
        if not ok:
            raise ConflictError(f"Leave request {req.request_id} has already been reviewed")

    def approve(self, request_id: int, *, admin_comment: Optional[str] = None) -> LeaveRequest:
        req = self._require_request(request_id)
        if not req.is_pending:
            raise ConflictError(f"Leave request {request_id} is already {req.status.value}")

        master = self._require_leave_master(req.leave_master_id)
        days = self._working_days(req)

        # Verified days are final; checked for the whole range before anything is written.
        for day in days:
            existing = self._attendance.get_for_employee_and_date(req.employee_id, day)
            if existing is not None and existing.is_verified:
                raise ConflictError(f"Attendance on {day:%Y-%m-%d} is already verified")

        self._decide(req, RequestStatus.APPROVED, admin_comment)

        note = f"Leave request #{req.request_id}"
        for day in days:
            self._attendance.upsert(
                AttendanceRecord(
                    attendance_id=None,
                    employee_id=req.employee_id,
                    work_date=day,
                    status=RawAttendanceStatus.LEAVE,
                    leave_master_id=master.leave_master_id,
                    admin_note=note,
                )
            )

        logger.info(
            "Approved leave request %s employee=%s type=%s days=%d", req.request_id, req.employee_id, master.name, len(days)
        )
        return self._require_request(request_id)

    def reject(self, request_id: int, *, admin_comment: Optional[str] = None) -> LeaveRequest:
        req = self._require_request(request_id)
        if not req.is_pending:
            raise ConflictError(f"Leave request {request_id} is already {req.status.value}")

        self._decide(req, RequestStatus.REJECTED, admin_comment)
        logger.info("Rejected leave request %s employee=%s", req.request_id, req.employee_id)
        return self._require_request(request_id)

    def review(self, request_id: int, *, status: Any, admin_comment: Optional[str] = None) -> LeaveRequest:
        decision = self._parse_status(status)
        if decision == RequestStatus.APPROVED:
            return self.approve(request_id, admin_comment=admin_comment)
        if decision == RequestStatus.REJECTED:
            return self.reject(request_id, admin_comment=admin_comment)
        raise ValidationError("status must be 'approved' or 'rejected'")
