"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_KEY_FORMAT = "%Y-%m-%d"
DEFAULT_API_BASE_URL = "http://localhost:4000"
DEFAULT_API_TIMEOUT = 10
DEFAULT_NOTICE_SECONDS = 2
DEFAULT_MAX_SESSIONS = 500
CSV_SUFFIX = ".csv"
