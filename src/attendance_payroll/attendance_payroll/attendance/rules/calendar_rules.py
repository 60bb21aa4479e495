from __future__ import annotations

from typing import Optional

from ...core.enums import ResolvedDayStatus
from .base import DayContext, ResolutionRule


class WeeklyRestDayRule(ResolutionRule):
    """The weekly rest day is a holiday whatever the record says."""

    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        if ctx.work_date.weekday() == ctx.weekly_rest_day:
            return ResolvedDayStatus.HOLIDAY
        return None


class MissingRecordRule(ResolutionRule):
    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        if ctx.record is None:
            return ResolvedDayStatus.NOT_MARKED
        return None
