"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Monthly salaries are converted to an hourly rate with a fixed month length.
HOURS_PER_MONTH = Decimal("160")

MAX_HOURS_PER_DAY = Decimal("24")
DEFAULT_HOURS_WORKED = Decimal("8")

CENTS = Decimal("0.01")

PAYROLL_LOCK_NAME = "hrm_payroll_generation"
DEFAULT_PAYROLL_LOCK_TIMEOUT = 10

RECENT_PAYROLL_DAYS = 7
DEFAULT_ACTIVITY_LIMIT = 100

APPOINTMENT_DURATION_MINUTES = 60
