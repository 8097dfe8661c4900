"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_RETENTION_DAYS = 730
DEFAULT_LIST_LIMIT = 200
HOURS_DECIMALS = 2
MIN_PASSWORD_LENGTH = 6
