from __future__ import annotations

from datetime import MAXYEAR, MINYEAR
from typing import Iterable

from ..core.exceptions import ValidationError


def require_period(year: int, month: int) -> tuple[int, int]:
    """Reject periods that do not describe a real calendar month."""
    try:
        y, m = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid payroll period: {year!r}-{month!r}")
    if not MINYEAR <= y <= MAXYEAR:
        raise ValidationError(f"Year out of range: {y}")
    if not 1 <= m <= 12:
        raise ValidationError(f"Month out of range: {m}")
    return y, m


def require_unique_dates(records: Iterable, *, employee_id: int) -> None:
    """One attendance record per (employee, date)."""
    seen = set()
    for r in records:
        if r.employee_id != employee_id:
            continue
        if r.work_date in seen:
            raise ValidationError(
                f"Duplicate attendance records for employee {employee_id} on {r.work_date:%Y-%m-%d}"
            )
        seen.add(r.work_date)
