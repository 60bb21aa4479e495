from __future__ import annotations

from enum import Enum


class RawAttendanceStatus(str, Enum):
    """Backend status code stored on an attendance record."""

    FULL = "full"
    PRESENT = "present"
    WFH = "wfh"
    HALF = "half"
    LEAVE = "leave"
    HOLIDAY = "holiday"
    MANDATORY_HOLIDAY = "mandatory_holiday"
    SPECIAL_LEAVE = "special_leave"
    ABSENT = "absent"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "RawAttendanceStatus":
        """Map any backend value onto the closed set; unknown values become OTHER."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


class VerificationStatus(str, Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"


class LeaveCategory(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    SPECIAL = "special"
    MANDATORY_HOLIDAY = "mandatory_holiday"
    UNPAID = "unpaid"


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class ResolvedDayStatus(str, Enum):
    """Canonical per-day status shown on the attendance grid and used by payroll."""

    HOLIDAY = "HOLIDAY"
    NOT_MARKED = "NOT_MARKED"
    MANDATORY_LEAVE = "MANDATORY_LEAVE"
    SPECIAL_LEAVE = "SPECIAL_LEAVE"
    PUNCH_IN_ONLY = "PUNCH_IN_ONLY"
    FULL_DAY = "FULL_DAY"
    VERIFIED = "VERIFIED"
    HALF_DAY = "HALF_DAY"
    VERIFIED_HALF = "VERIFIED_HALF"
    LEAVE = "LEAVE"


class SnapshotState(str, Enum):
    """Lifecycle of a payroll snapshot: PREVIEW -> LOCKED (terminal)."""

    PREVIEW = "PREVIEW"
    LOCKED = "LOCKED"


class RequestStatus(str, Enum):
    """Leave request review state: PENDING -> APPROVED | REJECTED (both terminal)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
