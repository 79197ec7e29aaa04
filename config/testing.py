SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": "http://storage.test",
    "timeout": 1,
}

DEBUG = False
TESTING = True

REQUIRE_ALL_MARKED = False
NOTICE_SECONDS = 2
MAX_SESSIONS = 20
LOG_LEVEL = "WARNING"
