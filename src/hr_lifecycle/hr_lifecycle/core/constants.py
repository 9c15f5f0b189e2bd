"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ORG_UTC_OFFSET_HOURS = 7
DEFAULT_CHECKOUT_TOLERANCE_SECONDS = 60
DEFAULT_AUTO_CHECKOUT_AFTER_HOURS = 1
DEFAULT_HISTORY_LIMIT = 14
DEFAULT_LIST_LIMIT = 200
MAX_LEAVE_REQUEST_DAYS = 366
