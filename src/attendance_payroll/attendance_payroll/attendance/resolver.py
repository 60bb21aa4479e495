from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_WEEKLY_REST_DAY
from ..core.enums import ResolvedDayStatus
from ..leaves.model import LeaveMaster
from .model import AttendanceRecord
from .rules.base import DayContext, ResolutionRule
from .rules.calendar_rules import MissingRecordRule, WeeklyRestDayRule
from .rules.leave_rules import LeaveMasterCategoryRule, RawMandatoryHolidayRule, RawSpecialLeaveRule
from .rules.punch_rules import OpenShiftRule, RawStatusRule

# First match wins. Order is the business precedence; do not sort.
PRECEDENCE: tuple[ResolutionRule, ...] = (
    WeeklyRestDayRule(),
    MissingRecordRule(),
    RawMandatoryHolidayRule(),
    RawSpecialLeaveRule(),
    LeaveMasterCategoryRule(),
    OpenShiftRule(),
    RawStatusRule(),
)


class AttendanceStatusResolver:
    """Classify one day of attendance into a ResolvedDayStatus.

    Pure: reads the record, the date and the referenced leave master and never
    mutates them. Verification is only read here; it is set by the
    verification action in AttendanceService.
    """

    def __init__(
        self,
        *,
        weekly_rest_day: int = DEFAULT_WEEKLY_REST_DAY,
        rules: Optional[Sequence[ResolutionRule]] = None,
    ):
        self._weekly_rest_day = int(weekly_rest_day)
        self._rules = tuple(rules) if rules is not None else PRECEDENCE

    @property
    def weekly_rest_day(self) -> int:
        return self._weekly_rest_day

    def resolve(
        self,
        record: Optional[AttendanceRecord],
        work_date: date,
        leave_master: Optional[LeaveMaster] = None,
    ) -> ResolvedDayStatus:
        ctx = DayContext(
            work_date=work_date,
            record=record,
            leave_master=leave_master,
            weekly_rest_day=self._weekly_rest_day,
        )
        for rule in self._rules:
            status = rule.apply(ctx)
            if status is not None:
                return status
        return ResolvedDayStatus.NOT_MARKED
