from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...core.enums import ResolvedDayStatus
from ...leaves.model import LeaveMaster
from ..model import AttendanceRecord


@dataclass(frozen=True)
class DayContext:
    work_date: date
    record: Optional[AttendanceRecord]
    leave_master: Optional[LeaveMaster]
    weekly_rest_day: int


class ResolutionRule(ABC):
    """Strategy Pattern: one row of the status precedence table.

    A rule returns a status when it fires, or None to let the next rule decide.
    """

    @abstractmethod
    def apply(self, ctx: DayContext) -> Optional[ResolvedDayStatus]:
        raise NotImplementedError
