from __future__ import annotations

from datetime import date, time

import pytest

from src.attendance_payroll.attendance_payroll.core.enums import RawAttendanceStatus, RequestStatus
from src.attendance_payroll.attendance_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.attendance_payroll.attendance_payroll.payroll.aggregator import MonthlyAttendanceAggregator
from src.attendance_payroll.attendance_payroll.requests.service import LeaveRequestService

CASUAL = 1
UNPAID = 4
MANDATORY = 5


@pytest.fixture
def service(repos, fixed_now):
    return LeaveRequestService(
        repos.leave_requests,
        repos.attendance,
        repos.employees,
        repos.leave_masters,
        clock=lambda: fixed_now,
    )


def _submit(service, start=date(2024, 4, 5), end=date(2024, 4, 8), leave_master_id=CASUAL, reason="Family trip"):
    return service.submit(employee_id=1, leave_master_id=leave_master_id, start_date=start, end_date=end, reason=reason)


def test_submitted_request_is_pending(service, repos, fixed_now):
    request_id = _submit(service)

    req = repos.leave_requests.get_by_id(request_id)
    assert req.status == RequestStatus.PENDING
    assert req.created_at == fixed_now
    assert [r.request_id for r in service.list_requests(status="pending")] == [request_id]
    assert service.list_requests(status="approved") == []


def test_approve_writes_leave_on_working_days(service, repos, make_record, leave_masters, employee):
    # A punch already recorded on the first day is replaced by the leave.
    repos.attendance.create(make_record(date(2024, 4, 5), "full"))
    request_id = _submit(service)

    approved = service.approve(request_id, admin_comment="  Enjoy  ")

    assert approved.status == RequestStatus.APPROVED
    assert approved.admin_comment == "Enjoy"
    records = repos.attendance.list_for_employee(1, start=date(2024, 4, 1), end=date(2024, 4, 30))
    # Sunday the 7th is skipped.
    assert [r.work_date for r in records] == [date(2024, 4, 5), date(2024, 4, 6), date(2024, 4, 8)]
    assert all(r.status == RawAttendanceStatus.LEAVE and r.leave_master_id == CASUAL for r in records)
    assert records[0].punch_in is None

    breakdown = MonthlyAttendanceAggregator().aggregate(records, leave_masters, 2024, 4, employee)
    assert breakdown.casual_leave.taken_this_month == 3
    assert breakdown.paid_leave_days == 3
    assert breakdown.full_days_worked == 0


def test_reject_writes_nothing(service, repos):
    request_id = _submit(service, leave_master_id=UNPAID)

    rejected = service.reject(request_id, admin_comment="Busy week")

    assert rejected.status == RequestStatus.REJECTED
    assert rejected.admin_comment == "Busy week"
    assert repos.attendance.list_for_employee(1, start=date(2024, 4, 1), end=date(2024, 4, 30)) == []


@pytest.mark.parametrize(
    "first,second",
    [
        ("approved", "approved"),
        ("approved", "rejected"),
        ("rejected", "approved"),
        ("rejected", "rejected"),
    ],
)
def test_second_review_is_a_conflict(service, repos, first, second):
    request_id = _submit(service)
    service.review(request_id, status=first)

    with pytest.raises(ConflictError):
        service.review(request_id, status=second)

    assert repos.leave_requests.get_by_id(request_id).status == RequestStatus(first)


def test_verified_day_blocks_approval(service, repos, make_record):
    repos.attendance.create(make_record(date(2024, 4, 6), "full", verified=True))
    request_id = _submit(service)

    with pytest.raises(ConflictError):
        service.approve(request_id)

    assert repos.leave_requests.get_by_id(request_id).is_pending
    assert repos.attendance.get_for_employee_and_date(1, date(2024, 4, 5)) is None
    assert repos.attendance.get_for_employee_and_date(1, date(2024, 4, 6)).punch_in == time(9, 0)


def test_review_needs_a_decision(service):
    request_id = _submit(service)
    with pytest.raises(ValidationError):
        service.review(request_id, status="pending")
    with pytest.raises(ValidationError):
        service.review(request_id, status="maybe")


def test_review_unknown_request(service):
    with pytest.raises(NotFoundError):
        service.approve(99)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start": date(2024, 4, 9), "end": date(2024, 4, 8)},
        {"reason": "   "},
        {"leave_master_id": MANDATORY},
        {"leave_master_id": 42},
        {"start": date(2024, 4, 7), "end": date(2024, 4, 7)},
    ],
)
def test_submit_rejects_invalid_requests(service, repos, kwargs):
    with pytest.raises(ValidationError):
        _submit(service, **kwargs)
    assert repos.leave_requests.rows == {}


def test_submit_for_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.submit(
            employee_id=42, leave_master_id=CASUAL, start_date=date(2024, 4, 5), end_date=date(2024, 4, 5), reason="x"
        )
