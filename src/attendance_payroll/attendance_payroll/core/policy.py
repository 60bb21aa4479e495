from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .constants import DEFAULT_LEAVE_ENTITLEMENTS, DEFAULT_WEEKLY_REST_DAY


@dataclass(frozen=True)
class PayrollPolicy:
    """Business switches that are policy choices rather than derived facts."""

    prorate_basic: bool = True
    count_open_shift_as_present: bool = False
    weekly_rest_day: int = DEFAULT_WEEKLY_REST_DAY
    leave_entitlements: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_LEAVE_ENTITLEMENTS))
    )

    @classmethod
    def from_settings(cls, settings: Any) -> "PayrollPolicy":
        entitlements = getattr(settings, "LEAVE_ENTITLEMENTS", None) or DEFAULT_LEAVE_ENTITLEMENTS
        return cls(
            prorate_basic=bool(getattr(settings, "PRORATE_BASIC", True)),
            count_open_shift_as_present=bool(getattr(settings, "COUNT_OPEN_SHIFT_AS_PRESENT", False)),
            weekly_rest_day=int(getattr(settings, "WEEKLY_REST_DAY", DEFAULT_WEEKLY_REST_DAY)),
            leave_entitlements=MappingProxyType({str(k): int(v) for k, v in dict(entitlements).items()}),
        )
