from __future__ import annotations

from datetime import date, time

import pytest

from src.attendance_payroll.attendance_payroll.attendance.resolver import AttendanceStatusResolver
from src.attendance_payroll.attendance_payroll.core.enums import LeaveCategory, PaymentStatus, ResolvedDayStatus
from src.attendance_payroll.attendance_payroll.leaves.model import LeaveMaster

# April 2024: the 1st is a Monday, Sundays fall on 7/14/21/28.
SUNDAY = date(2024, 4, 7)
TUESDAY = date(2024, 4, 2)

MANDATORY_MASTER = LeaveMaster(5, "Founders Day", LeaveCategory.MANDATORY_HOLIDAY, PaymentStatus.PAID)
SPECIAL_MASTER = LeaveMaster(3, "Special Leave", LeaveCategory.SPECIAL, PaymentStatus.PAID)
CASUAL_MASTER = LeaveMaster(1, "Casual Leave", LeaveCategory.CASUAL, PaymentStatus.PAID)


@pytest.fixture
def resolver():
    return AttendanceStatusResolver()


def test_sunday_is_holiday_even_with_verified_full_record(resolver, make_record):
    record = make_record(SUNDAY, "full", verified=True)
    assert resolver.resolve(record, SUNDAY) == ResolvedDayStatus.HOLIDAY


def test_sunday_without_record_is_holiday(resolver):
    assert resolver.resolve(None, SUNDAY) == ResolvedDayStatus.HOLIDAY


def test_missing_weekday_record_is_not_marked(resolver):
    assert resolver.resolve(None, TUESDAY) == ResolvedDayStatus.NOT_MARKED


def test_leave_master_category_fallback_gives_mandatory_leave(resolver, make_record):
    record = make_record(TUESDAY, "absent", punch_in=None, punch_out=None, leave_master_id=5)
    assert resolver.resolve(record, TUESDAY, MANDATORY_MASTER) == ResolvedDayStatus.MANDATORY_LEAVE


def test_leave_master_category_fallback_gives_special_leave(resolver, make_record):
    record = make_record(TUESDAY, "leave", punch_in=None, punch_out=None, leave_master_id=3)
    assert resolver.resolve(record, TUESDAY, SPECIAL_MASTER) == ResolvedDayStatus.SPECIAL_LEAVE


def test_raw_special_leave_wins_over_casual_master(resolver, make_record):
    record = make_record(TUESDAY, "special_leave", punch_in=None, punch_out=None, leave_master_id=1)
    assert resolver.resolve(record, TUESDAY, CASUAL_MASTER) == ResolvedDayStatus.SPECIAL_LEAVE


def test_raw_mandatory_holiday_wins_over_punches(resolver, make_record):
    record = make_record(TUESDAY, "mandatory_holiday", punch_out=None)
    assert resolver.resolve(record, TUESDAY) == ResolvedDayStatus.MANDATORY_LEAVE


@pytest.mark.parametrize("raw", ["full", "half", "leave", "absent"])
def test_open_shift_overrides_raw_status(resolver, make_record, raw):
    record = make_record(TUESDAY, raw, punch_in=time(9, 0), punch_out=None, verified=True)
    assert resolver.resolve(record, TUESDAY) == ResolvedDayStatus.PUNCH_IN_ONLY


@pytest.mark.parametrize("raw", ["full", "present", "wfh"])
def test_worked_statuses(resolver, make_record, raw):
    assert resolver.resolve(make_record(TUESDAY, raw), TUESDAY) == ResolvedDayStatus.FULL_DAY
    assert resolver.resolve(make_record(TUESDAY, raw, verified=True), TUESDAY) == ResolvedDayStatus.VERIFIED


def test_half_day_needs_both_punches_and_verification(resolver, make_record):
    assert resolver.resolve(make_record(TUESDAY, "half"), TUESDAY) == ResolvedDayStatus.HALF_DAY
    assert resolver.resolve(make_record(TUESDAY, "half", verified=True), TUESDAY) == ResolvedDayStatus.VERIFIED_HALF

    no_punches = make_record(TUESDAY, "half", punch_in=None, punch_out=None, verified=True)
    assert resolver.resolve(no_punches, TUESDAY) == ResolvedDayStatus.HALF_DAY


def test_raw_leave_and_holiday(resolver, make_record):
    leave = make_record(TUESDAY, "leave", punch_in=None, punch_out=None, leave_master_id=1)
    holiday = make_record(TUESDAY, "holiday", punch_in=None, punch_out=None)

    assert resolver.resolve(leave, TUESDAY, CASUAL_MASTER) == ResolvedDayStatus.LEAVE
    assert resolver.resolve(holiday, TUESDAY) == ResolvedDayStatus.HOLIDAY


@pytest.mark.parametrize("raw", ["absent", "other", "something-new"])
def test_unmapped_raw_status_is_not_marked(resolver, make_record, raw):
    record = make_record(TUESDAY, raw, punch_in=None, punch_out=None)
    assert resolver.resolve(record, TUESDAY) == ResolvedDayStatus.NOT_MARKED


def test_resolution_is_idempotent_and_leaves_record_untouched(resolver, make_record):
    record = make_record(TUESDAY, "half", verified=True)
    before = record

    first = resolver.resolve(record, TUESDAY)
    second = resolver.resolve(record, TUESDAY)

    assert first == second == ResolvedDayStatus.VERIFIED_HALF
    assert record == before


def test_configured_rest_day():
    saturday = date(2024, 4, 6)
    resolver = AttendanceStatusResolver(weekly_rest_day=5)

    assert resolver.resolve(None, saturday) == ResolvedDayStatus.HOLIDAY
    assert resolver.resolve(None, SUNDAY) == ResolvedDayStatus.NOT_MARKED
