"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REGULAR_HOURS_PER_DAY = 8
DEFAULT_OVERTIME_RATE = 1.5
DEFAULT_HISTORY_LIMIT = 30
MIN_PASSWORD_LENGTH = 6

DEFAULT_COMPANY_NAME = "Acme Corporation"
DEFAULT_WORKING_HOURS_START = "09:00"
DEFAULT_WORKING_HOURS_END = "17:00"
DEFAULT_AUTO_CHECKOUT_TIME = "23:00"
