from __future__ import annotations

from typing import Optional

from ...core.enums import LeaveCategory, RawAttendanceStatus, ResolvedDayStatus
from .base import DayContext, ResolutionRule


class RawMandatoryHolidayRule(ResolutionRule):
    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        if ctx.record.status == RawAttendanceStatus.MANDATORY_HOLIDAY:
            return ResolvedDayStatus.MANDATORY_LEAVE
        return None


class RawSpecialLeaveRule(ResolutionRule):
    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        if ctx.record.status == RawAttendanceStatus.SPECIAL_LEAVE:
            return ResolvedDayStatus.SPECIAL_LEAVE
        return None


class LeaveMasterCategoryRule(ResolutionRule):
    """Fallback for records created before the dedicated raw statuses existed."""

    _MAPPING = {
        LeaveCategory.SPECIAL: ResolvedDayStatus.SPECIAL_LEAVE,
        LeaveCategory.MANDATORY_HOLIDAY: ResolvedDayStatus.MANDATORY_LEAVE,
    }

    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        if ctx.leave_master is None:
            return None
        return self._MAPPING.get(ctx.leave_master.category)
