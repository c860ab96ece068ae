"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Salary structure
BASIC_RATE = Decimal("0.5")
HRA_RATE = Decimal("0.5")
STANDARD_ALLOWANCE = Decimal("4167.00")
BONUS_RATE = Decimal("0.0833")
LTA_RATE = Decimal("0.0833")
PF_RATE = Decimal("0.12")
PROFESSIONAL_TAX = Decimal("200.00")
ROUNDING_TOLERANCE = Decimal("1")
# Most that cent rounding of pro-rated components can overshoot the applicable wage
PRORATION_ROUNDING_SLACK = Decimal("0.05")

# Attendance
STANDARD_WORK_HOURS = 9
DEFAULT_BREAK_TIME_HOURS = 1.0
# Monday=0 ... Sunday=6
DEFAULT_WORKING_DAYS = frozenset({0, 1, 2, 3, 4})

DEFAULT_LIST_LIMIT = 200
