from __future__ import annotations

from typing import Optional

from ...core.enums import RawAttendanceStatus, ResolvedDayStatus
from .base import DayContext, ResolutionRule


class OpenShiftRule(ResolutionRule):
    """Punched in but never punched out: the shift is still open."""

    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        r = ctx.record
        if r.has_punch_in and not r.has_punch_out:
            return ResolvedDayStatus.PUNCH_IN_ONLY
        return None


class RawStatusRule(ResolutionRule):
    """Last row of the table: always decides."""

    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        r = ctx.record
        status = r.status

        if status in (RawAttendanceStatus.FULL, RawAttendanceStatus.PRESENT, RawAttendanceStatus.WFH):
            return ResolvedDayStatus.VERIFIED if r.is_verified else ResolvedDayStatus.FULL_DAY

        if status == RawAttendanceStatus.HALF:
            if r.has_punch_in and r.has_punch_out and r.is_verified:
                return ResolvedDayStatus.VERIFIED_HALF
            return ResolvedDayStatus.HALF_DAY

        if status == RawAttendanceStatus.LEAVE:
            return ResolvedDayStatus.LEAVE

        if status == RawAttendanceStatus.HOLIDAY:
            return ResolvedDayStatus.HOLIDAY

        return ResolvedDayStatus.NOT_MARKED
