"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

MAX_DAY_HOURS = Decimal("24")
HOURS_STEP = Decimal("0.5")

DEFAULT_WORKING_DAYS = 5
DEFAULT_WORKING_HOURS_PER_WEEK = 40
DEFAULT_CURRENCY = "INR"

# Billable hours per month used for the profit estimate.
BILLABLE_HOURS_PER_MONTH = Decimal("160")

INVOICE_DUE_DAYS = 30
INVOICE_NUMBER_PREFIX = "INV"

WEEKDAY_KEYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
