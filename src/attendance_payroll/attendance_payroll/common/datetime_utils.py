from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_punch_time(value: Any) -> Optional[time]:
    """Best-effort conversion of a punch value to a time.

    Accepts time, datetime, timedelta (MySQL TIME) and "HH:MM[:SS]" strings,
    optionally prefixed with a date ("YYYY-MM-DD HH:MM" or ISO "T" form).
    Anything empty or malformed is reported as no punch.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(total_seconds // 3600, (total_seconds % 3600) // 60, total_seconds % 60)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if "T" in text:
        text = text.split("T", 1)[1]
    elif " " in text:
        text = text.rsplit(" ", 1)[1]
    # Drop fractional seconds and timezone suffixes.
    text = text.split(".", 1)[0].split("+", 1)[0].split("-", 1)[0].rstrip("Z")

    parts = text.split(":")
    if len(parts) < 2:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hours, minutes, seconds)
    except ValueError:
        return None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def iter_month_days(year: int, month: int) -> Iterator[date]:
    for day in range(1, days_in_month(year, month) + 1):
        yield date(year, month, day)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def period_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%B %Y")
