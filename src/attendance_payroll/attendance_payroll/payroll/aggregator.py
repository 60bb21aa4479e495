from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from types import MappingProxyType
from typing import Iterable, Optional, Union

from ..attendance.model import AttendanceRecord
from ..attendance.resolver import AttendanceStatusResolver
from ..common.datetime_utils import days_in_month, iter_month_days, month_bounds
from ..common.validators import require_period, require_unique_dates
from ..core.constants import HALF_DAY_WEIGHT
from ..core.enums import LeaveCategory, RawAttendanceStatus, ResolvedDayStatus
from ..core.policy import PayrollPolicy
from ..employees.model import Employee
from ..leaves.catalog import LeaveCatalog
from ..leaves.model import LeaveMaster
from .model import HolidayCounts, LeaveCounter, MonthlyBreakdown

logger = logging.getLogger(__name__)

_WORKED = (ResolvedDayStatus.FULL_DAY, ResolvedDayStatus.VERIFIED)
_HALF = (ResolvedDayStatus.HALF_DAY, ResolvedDayStatus.VERIFIED_HALF)
_BALANCED = (LeaveCategory.CASUAL, LeaveCategory.SICK, LeaveCategory.SPECIAL)


def _leave_category(
    status: ResolvedDayStatus,
    master: Optional[LeaveMaster],
) -> Optional[LeaveCategory]:
    if status == ResolvedDayStatus.SPECIAL_LEAVE:
        return LeaveCategory.SPECIAL
    if status == ResolvedDayStatus.LEAVE and master is not None:
        return master.category
    return None


class MonthlyAttendanceAggregator:
    """Fold one month of resolved day statuses into a MonthlyBreakdown."""

    def __init__(
        self,
        resolver: Optional[AttendanceStatusResolver] = None,
        *,
        policy: Optional[PayrollPolicy] = None,
    ):
        self._policy = policy or PayrollPolicy()
        self._resolver = resolver or AttendanceStatusResolver(weekly_rest_day=self._policy.weekly_rest_day)
        # Rest days are counted with the same weekday the resolver classifies as HOLIDAY.
        self._rest_day = self._resolver.weekly_rest_day

    def _catalog(self, leave_masters: Union[LeaveCatalog, Iterable[LeaveMaster]]) -> LeaveCatalog:
        if isinstance(leave_masters, LeaveCatalog):
            return leave_masters
        return LeaveCatalog(leave_masters or (), entitlements=self._policy.leave_entitlements)

    def _resolve(self, record: Optional[AttendanceRecord], day: date, catalog: LeaveCatalog) -> ResolvedDayStatus:
        master = catalog.get(record.leave_master_id) if record is not None else None
        return self._resolver.resolve(record, day, master)

    def resolve_month(
        self,
        records: Iterable[AttendanceRecord],
        leave_masters: Union[LeaveCatalog, Iterable[LeaveMaster]],
        year: int,
        month: int,
        employee_id: int,
    ) -> list[tuple[date, Optional[AttendanceRecord], ResolvedDayStatus]]:
        """Resolved status for every calendar day of the month, in date order."""
        year, month = require_period(year, month)
        records = list(records)
        require_unique_dates(records, employee_id=employee_id)
        catalog = self._catalog(leave_masters)
        by_date = self._index(records, employee_id, *month_bounds(year, month))
        return [(d, by_date.get(d), self._resolve(by_date.get(d), d, catalog)) for d in iter_month_days(year, month)]

    @staticmethod
    def _index(records: Iterable[AttendanceRecord], employee_id: int, start: date, end: date) -> dict[date, AttendanceRecord]:
        by_date: dict[date, AttendanceRecord] = {}
        dropped = 0
        for r in records:
            if r.employee_id != employee_id:
                dropped += 1
                continue
            if start <= r.work_date <= end:
                by_date[r.work_date] = r
        if dropped:
            logger.debug("Dropped %d attendance records not belonging to employee %s", dropped, employee_id)
        return by_date

    def aggregate(
        self,
        records: Iterable[AttendanceRecord],
        leave_masters: Union[LeaveCatalog, Iterable[LeaveMaster]],
        year: int,
        month: int,
        employee: Employee,
        *,
        year_records: Optional[Iterable[AttendanceRecord]] = None,
    ) -> MonthlyBreakdown:
        # Input contract is checked before anything is counted.
        year, month = require_period(year, month)
        employee_id = employee.employee_id
        records = list(records)
        require_unique_dates(records, employee_id=employee_id)
        if year_records is not None:
            year_records = list(year_records)
            require_unique_dates(year_records, employee_id=employee_id)

        catalog = self._catalog(leave_masters)
        start, end = month_bounds(year, month)
        by_date = self._index(records, employee_id, start, end)

        statuses: Counter = Counter()
        taken: Counter = Counter()
        sundays = declared = mandatory = special = 0
        full_days = 0
        half_days = 0.0
        wfh_days = 0
        open_shifts = 0
        paid_leave = 0
        unpaid_leave = 0
        not_marked = 0

        for day in iter_month_days(year, month):
            record = by_date.get(day)
            master = catalog.get(record.leave_master_id) if record is not None else None
            status = self._resolver.resolve(record, day, master)
            statuses[status] += 1

            if status == ResolvedDayStatus.HOLIDAY:
                if day.weekday() == self._rest_day:
                    sundays += 1
                else:
                    declared += 1
            elif status == ResolvedDayStatus.MANDATORY_LEAVE:
                mandatory += 1
            elif status == ResolvedDayStatus.SPECIAL_LEAVE:
                special += 1
            elif status in _WORKED:
                full_days += 1
                if record.status == RawAttendanceStatus.WFH:
                    wfh_days += 1
            elif status in _HALF:
                half_days += HALF_DAY_WEIGHT
            elif status == ResolvedDayStatus.PUNCH_IN_ONLY:
                open_shifts += 1
                if self._policy.count_open_shift_as_present:
                    full_days += 1
            elif status == ResolvedDayStatus.LEAVE:
                if master is not None and master.is_paid:
                    paid_leave += 1
                else:
                    unpaid_leave += 1
            elif status == ResolvedDayStatus.NOT_MARKED:
                not_marked += 1

            category = _leave_category(status, master)
            if category is not None:
                taken[category] += 1

        used = self._year_to_date_usage(year_records, by_date, catalog, year, month, employee_id) if year_records is not None else taken

        def counter(category: LeaveCategory) -> LeaveCounter:
            entitlement = catalog.entitlement(category)
            return LeaveCounter(
                taken_this_month=taken[category],
                used_total_year=used[category],
                remaining_balance=None if entitlement is None else entitlement - used[category],
            )

        dim = days_in_month(year, month)
        holidays = HolidayCounts(mandatory=mandatory, special=special, declared=declared)
        total_working_days = dim - sundays - holidays.excluded_from_working_days
        effective_paid_days = full_days + half_days + paid_leave + declared
        days_to_deduct = max(total_working_days - effective_paid_days, 0)
        if total_working_days > 0:
            attendance_percentage = round(effective_paid_days / total_working_days * 100, 1)
        else:
            attendance_percentage = 0.0

        return MonthlyBreakdown(
            employee_id=employee_id,
            year=year,
            month=month,
            days_in_month=dim,
            sundays=sundays,
            holidays=holidays,
            full_days_worked=full_days,
            half_days_worked=half_days,
            wfh_days_worked=wfh_days,
            open_shifts=open_shifts,
            casual_leave=counter(LeaveCategory.CASUAL),
            sick_leave=counter(LeaveCategory.SICK),
            special_leave=counter(LeaveCategory.SPECIAL),
            paid_leave_days=paid_leave,
            unpaid_leave_days=unpaid_leave,
            not_marked_days=not_marked,
            total_working_days=total_working_days,
            effective_paid_days=effective_paid_days,
            days_to_deduct=days_to_deduct,
            attendance_percentage=attendance_percentage,
            status_counts=MappingProxyType(dict(statuses)),
        )

    def _year_to_date_usage(
        self,
        year_records: list[AttendanceRecord],
        month_by_date: dict[date, AttendanceRecord],
        catalog: LeaveCatalog,
        year: int,
        month: int,
        employee_id: int,
    ) -> Counter:
        """Leave days per category from January 1st through the end of the month."""
        _, end = month_bounds(year, month)
        by_date = self._index(year_records, employee_id, date(year, 1, 1), end)
        # This month's records are authoritative over the year-to-date feed.
        by_date.update(month_by_date)

        used: Counter = Counter()
        for day in sorted(by_date):
            record = by_date[day]
            master = catalog.get(record.leave_master_id)
            category = _leave_category(self._resolver.resolve(record, day, master), master)
            if category in _BALANCED:
                used[category] += 1
        return used
