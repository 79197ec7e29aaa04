import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:4000"),
    "timeout": float(os.getenv("API_TIMEOUT", "10")),
}

DEBUG = False

REQUIRE_ALL_MARKED = bool(int(os.getenv("REQUIRE_ALL_MARKED", "0")))
NOTICE_SECONDS = int(os.getenv("NOTICE_SECONDS", "2"))
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "500"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
