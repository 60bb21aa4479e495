from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.policy import PayrollPolicy
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveMasterRepository
from .payroll.aggregator import MonthlyAttendanceAggregator
from .payroll.engine import PayrollAccrualEngine
from .payroll.mysql_payroll_repository import MySQLDeductionRepository, MySQLPayrollSnapshotRepository
from .payroll.service import PayrollService
from .requests.mysql_request_repository import MySQLLeaveRequestRepository
from .requests.service import LeaveRequestService


@dataclass(frozen=True)
class Container:
    policy: PayrollPolicy
    attendance_service: AttendanceService
    payroll_service: PayrollService
    request_service: LeaveRequestService
    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees,
    attendance,
    leave_masters,
    deductions,
    snapshots,
    leave_requests,
    policy: Optional[PayrollPolicy] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    policy = policy or PayrollPolicy()
    aggregator = MonthlyAttendanceAggregator(policy=policy)

    attendance_service = AttendanceService(attendance, employees, leave_masters, aggregator=aggregator, policy=policy)
    payroll_service = PayrollService(
        employees,
        attendance,
        leave_masters,
        deductions,
        snapshots,
        policy=policy,
        aggregator=aggregator,
        engine=PayrollAccrualEngine.for_policy(policy),
    )
    request_service = LeaveRequestService(leave_requests, attendance, employees, leave_masters, policy=policy)
    return Container(
        policy=policy,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        request_service=request_service,
        conn=conn,
    )


def build_container(*, db_config: Mapping, policy: Optional[PayrollPolicy] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_services(
        employees=MySQLEmployeeRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leave_masters=MySQLLeaveMasterRepository(conn),
        deductions=MySQLDeductionRepository(conn),
        snapshots=MySQLPayrollSnapshotRepository(conn),
        leave_requests=MySQLLeaveRequestRepository(conn),
        policy=policy,
        conn=conn,
    )
