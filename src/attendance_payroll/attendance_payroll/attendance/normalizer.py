"""Single normalization step at the data-access boundary.

Upstream payloads and legacy rows name the same attribute in several ways
(``status`` vs ``attendance_status``, ``punch_in`` vs ``punch_in_time`` ...).
Everything below this module works on the canonical dataclasses only.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_punch_time
from ..core.enums import LeaveCategory, PaymentStatus, RawAttendanceStatus, VerificationStatus
from ..core.exceptions import ValidationError
from ..leaves.model import LeaveMaster
from .model import AttendanceRecord

_ID_KEYS = ("attendance_id", "id")
_EMPLOYEE_KEYS = ("employee_id", "user_id", "employee", "user")
_DATE_KEYS = ("work_date", "date")
_STATUS_KEYS = ("status", "attendance_status")
_PUNCH_IN_KEYS = ("punch_in", "punch_in_time", "in_time")
_PUNCH_OUT_KEYS = ("punch_out", "punch_out_time", "out_time")
_VERIFICATION_KEYS = ("verification_status", "is_verified", "verified")
_LEAVE_MASTER_KEYS = ("leave_master_id", "leave_master", "leave_type_id")
_NOTE_KEYS = ("admin_note", "note")

_TRUTHY = {"1", "true", "yes", "y", "verified", "paid", "active"}

_CATEGORY_ALIASES = {
    "casual_leave": LeaveCategory.CASUAL,
    "sick_leave": LeaveCategory.SICK,
    "special_leave": LeaveCategory.SPECIAL,
    "special_holiday": LeaveCategory.SPECIAL,
    "unpaid_leave": LeaveCategory.UNPAID,
    "holiday": LeaveCategory.MANDATORY_HOLIDAY,
}


def _first(payload: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_id(value: Any) -> Optional[int]:
    if isinstance(value, Mapping):
        value = value.get("id")
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUTHY


def _as_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_iso_date(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} is not a valid date: {value!r}")


def normalize_attendance(payload: Mapping[str, Any]) -> AttendanceRecord:
    employee_id = _as_id(_first(payload, _EMPLOYEE_KEYS))
    if employee_id is None:
        raise ValidationError("Attendance record has no employee reference")

    work_date = _as_date(_first(payload, _DATE_KEYS), "work_date")
    verified = _as_bool(_first(payload, _VERIFICATION_KEYS))
    note = _first(payload, _NOTE_KEYS)

    return AttendanceRecord(
        attendance_id=_as_id(_first(payload, _ID_KEYS)),
        employee_id=employee_id,
        work_date=work_date,
        status=RawAttendanceStatus.parse(_first(payload, _STATUS_KEYS)),
        punch_in=parse_punch_time(_first(payload, _PUNCH_IN_KEYS)),
        punch_out=parse_punch_time(_first(payload, _PUNCH_OUT_KEYS)),
        verification=VerificationStatus.VERIFIED if verified else VerificationStatus.UNVERIFIED,
        leave_master_id=_as_id(_first(payload, _LEAVE_MASTER_KEYS)),
        admin_note=str(note) if note is not None else None,
    )


def parse_leave_category(value: Any) -> LeaveCategory:
    key = str(value or "").strip().lower()
    if key in _CATEGORY_ALIASES:
        return _CATEGORY_ALIASES[key]
    try:
        return LeaveCategory(key)
    except ValueError:
        raise ValidationError(f"Unknown leave category: {value!r}")


def normalize_leave_master(payload: Mapping[str, Any]) -> LeaveMaster:
    leave_master_id = _as_id(_first(payload, ("leave_master_id", "id")))
    if leave_master_id is None:
        raise ValidationError("Leave master has no id")

    category = parse_leave_category(_first(payload, ("category", "leave_category", "type")))

    payment_raw = _first(payload, ("payment_status", "payment"))
    if payment_raw is None:
        paid = _as_bool(payload.get("is_paid", category != LeaveCategory.UNPAID))
    else:
        paid = str(payment_raw).strip().lower() == PaymentStatus.PAID.value

    active_raw = _first(payload, ("is_active", "active"))
    fixed_raw = _first(payload, ("fixed_date", "holiday_date"))

    return LeaveMaster(
        leave_master_id=leave_master_id,
        name=str(_first(payload, ("name", "leave_name")) or category.value),
        category=category,
        payment=PaymentStatus.PAID if paid else PaymentStatus.UNPAID,
        is_active=True if active_raw is None else _as_bool(active_raw),
        fixed_date=_as_date(fixed_raw, "fixed_date") if fixed_raw is not None else None,
    )
