"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MAX_MONTHLY_LIMIT = 31
MAX_LEAVE_DAYS = 31
DEFAULT_LIST_LIMIT = 200
OFF_SHIFT = "Off"
GENERIC_VALIDATION_ERROR = "An unexpected error occurred during validation."
GENERIC_STORE_ERROR = "The data store is unavailable. Please try again later."
