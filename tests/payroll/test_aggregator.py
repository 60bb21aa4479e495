from __future__ import annotations

from dataclasses import replace
from datetime import date, time

import pytest

from src.attendance_payroll.attendance_payroll.attendance.resolver import AttendanceStatusResolver
from src.attendance_payroll.attendance_payroll.common.datetime_utils import iter_month_days
from src.attendance_payroll.attendance_payroll.core.enums import ResolvedDayStatus
from src.attendance_payroll.attendance_payroll.core.exceptions import ValidationError
from src.attendance_payroll.attendance_payroll.core.policy import PayrollPolicy
from src.attendance_payroll.attendance_payroll.payroll.aggregator import MonthlyAttendanceAggregator


def _weekdays(year: int, month: int):
    return [d for d in iter_month_days(year, month) if d.weekday() != 6]


@pytest.fixture
def aggregator():
    return MonthlyAttendanceAggregator()


def test_full_month_of_work(aggregator, make_record, leave_masters, employee):
    records = [make_record(d, "full") for d in _weekdays(2024, 4)]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)

    assert b.days_in_month == 30
    assert b.sundays == 4
    assert b.total_working_days == 26
    assert b.full_days_worked == 26
    assert b.effective_paid_days == 26
    assert b.days_to_deduct == 0
    assert b.attendance_percentage == 100.0


def test_mixed_month(aggregator, make_record, leave_masters, employee):
    days = _weekdays(2024, 4)
    records = [
        make_record(days[0], "half", verified=True),
        make_record(days[1], "leave", punch_in=None, punch_out=None, leave_master_id=1),
        make_record(days[2], "leave", punch_in=None, punch_out=None, leave_master_id=4),
        make_record(days[3], "leave", punch_in=None, punch_out=None),
        make_record(days[4], "wfh"),
        make_record(days[5], "full", punch_out=None),
        make_record(date(2024, 4, 15), "mandatory_holiday", punch_in=None, punch_out=None),
        make_record(date(2024, 4, 16), "special_leave", punch_in=None, punch_out=None),
        make_record(date(2024, 4, 17), "holiday", punch_in=None, punch_out=None),
    ]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)

    assert b.half_days_worked == 0.5
    assert b.paid_leave_days == 1
    # Leave without a leave type counts as unpaid.
    assert b.unpaid_leave_days == 2
    assert b.full_days_worked == 1
    assert b.wfh_days_worked == 1
    assert b.open_shifts == 1
    assert b.holidays.mandatory == 1
    assert b.holidays.special == 1
    assert b.holidays.declared == 1
    assert b.casual_leave.taken_this_month == 1
    assert b.special_leave.taken_this_month == 1
    assert b.total_working_days == 30 - 4 - 2
    assert b.effective_paid_days == 1 + 0.5 + 1 + 1
    assert b.not_marked_days == 30 - 4 - 9
    assert b.status_counts[ResolvedDayStatus.PUNCH_IN_ONLY] == 1


def test_work_on_sunday_is_a_rest_day(aggregator, make_record, leave_masters, employee):
    records = [
        make_record(date(2024, 4, 7), "full", verified=True),
        make_record(date(2024, 4, 8), "full"),
    ]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)

    assert b.sundays == 4
    assert b.holidays.declared == 0
    assert b.full_days_worked == 1
    assert b.effective_paid_days == 1
    assert b.total_working_days == 26
    assert b.status_counts[ResolvedDayStatus.HOLIDAY] == 4


def test_rest_day_follows_the_resolver(leave_masters, employee):
    # Saturday rest: April 2024 has four Saturdays and four Sundays.
    aggregator = MonthlyAttendanceAggregator(AttendanceStatusResolver(weekly_rest_day=5))
    b = aggregator.aggregate([], leave_masters, 2024, 4, employee)

    assert b.sundays == 4
    assert b.holidays.declared == 0
    assert b.total_working_days == 26
    assert b.effective_paid_days == 0
    assert b.not_marked_days == 26


def test_working_days_identity_and_non_negative_deduction(aggregator, make_record, leave_masters, employee):
    records = [make_record(d, "full") for d in _weekdays(2024, 4)[:3]]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)

    assert b.total_working_days == b.days_in_month - b.sundays - b.holidays.mandatory - b.holidays.special
    assert b.days_to_deduct == b.total_working_days - b.effective_paid_days
    assert b.days_to_deduct >= 0


def test_month_without_working_days(aggregator, make_record, leave_masters, employee):
    # Every weekday is a special holiday.
    records = [
        make_record(d, "special_leave", punch_in=None, punch_out=None) for d in _weekdays(2024, 4)
    ]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)

    assert b.total_working_days == 0
    assert b.days_to_deduct == 0
    assert b.attendance_percentage == 0.0
    assert isinstance(b.attendance_percentage, float)


def test_open_shift_counts_as_present_only_under_policy(make_record, leave_masters, employee):
    records = [make_record(date(2024, 4, 2), "full", punch_out=None)]

    strict = MonthlyAttendanceAggregator().aggregate(records, leave_masters, 2024, 4, employee)
    lenient = MonthlyAttendanceAggregator(policy=PayrollPolicy(count_open_shift_as_present=True)).aggregate(
        records, leave_masters, 2024, 4, employee
    )

    assert strict.full_days_worked == 0
    assert lenient.full_days_worked == 1
    assert strict.open_shifts == lenient.open_shifts == 1


def test_duplicate_dates_are_rejected(aggregator, make_record, leave_masters, employee):
    records = [make_record(date(2024, 4, 2), "full"), make_record(date(2024, 4, 2), "half")]
    with pytest.raises(ValidationError):
        aggregator.aggregate(records, leave_masters, 2024, 4, employee)


@pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), ("x", 4)])
def test_invalid_period(aggregator, leave_masters, employee, year, month):
    with pytest.raises(ValidationError):
        aggregator.aggregate([], leave_masters, year, month, employee)


def test_other_employee_records_are_ignored(aggregator, make_record, leave_masters, employee):
    records = [
        make_record(date(2024, 4, 2), "full"),
        make_record(date(2024, 4, 2), "full", employee_id=2),
        make_record(date(2024, 4, 3), "full", employee_id=2),
    ]
    b = aggregator.aggregate(records, leave_masters, 2024, 4, employee)
    assert b.full_days_worked == 1


def test_inactive_leave_master_is_treated_as_unknown(aggregator, make_record, leave_masters, employee):
    masters = [replace(m, is_active=False) if m.leave_master_id == 1 else m for m in leave_masters]
    records = [make_record(date(2024, 4, 2), "leave", punch_in=None, punch_out=None, leave_master_id=1)]
    b = aggregator.aggregate(records, masters, 2024, 4, employee)

    assert b.paid_leave_days == 0
    assert b.unpaid_leave_days == 1


def test_year_to_date_leave_balances(aggregator, make_record, leave_masters, employee):
    year_records = [
        make_record(date(2024, 1, 9), "leave", punch_in=None, punch_out=None, leave_master_id=1),
        make_record(date(2024, 2, 6), "leave", punch_in=None, punch_out=None, leave_master_id=1),
        make_record(date(2024, 3, 5), "leave", punch_in=None, punch_out=None, leave_master_id=2),
        make_record(date(2024, 4, 2), "leave", punch_in=None, punch_out=None, leave_master_id=1),
        # After the period: must not count.
        make_record(date(2024, 5, 7), "leave", punch_in=None, punch_out=None, leave_master_id=1),
    ]
    month_records = [r for r in year_records if r.work_date.month == 4]

    b = aggregator.aggregate(month_records, leave_masters, 2024, 4, employee, year_records=year_records)

    assert b.casual_leave.taken_this_month == 1
    assert b.casual_leave.used_total_year == 3
    assert b.casual_leave.remaining_balance == 12 - 3
    assert b.sick_leave.used_total_year == 1
    assert b.sick_leave.remaining_balance == 11
    # No entitlement configured for special leave.
    assert b.special_leave.remaining_balance is None


def test_resolve_month_lists_every_day(aggregator, make_record, leave_masters):
    rows = aggregator.resolve_month([make_record(date(2024, 2, 29), "full")], leave_masters, 2024, 2, 1)

    assert len(rows) == 29
    day, record, status = rows[-1]
    assert day == date(2024, 2, 29)
    assert record.punch_in == time(9, 0)
    assert status == ResolvedDayStatus.FULL_DAY
