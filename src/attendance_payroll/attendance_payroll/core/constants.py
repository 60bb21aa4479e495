"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# date.weekday(): Monday=0 ... Sunday=6
SUNDAY = 6
DEFAULT_WEEKLY_REST_DAY = SUNDAY

MONEY_QUANT = Decimal("0.01")
HALF_DAY_WEIGHT = 0.5

DEFAULT_LEAVE_ENTITLEMENTS = {
    "casual": 12,
    "sick": 12,
}

PAYSLIP_SCHEMA_VERSION = 1

# Data-quality codes reported on a payroll snapshot.
ANOMALY_MISSING_BASIC_SALARY = "missing_basic_salary"
ANOMALY_NEGATIVE_NET_PAY = "negative_net_pay"
ANOMALY_OPEN_SHIFTS = "open_shifts"
ANOMALY_UNMARKED_DAYS = "unmarked_days"
