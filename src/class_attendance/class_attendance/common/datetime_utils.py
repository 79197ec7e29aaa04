from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import DATE_KEY_FORMAT
from ..core.exceptions import ValidationError


def parse_date_key(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def normalize_date_key(value: str) -> str:
    """Re-format a user supplied date so it always matches the stored partition key."""
    return parse_date_key(value.strip()).strftime(DATE_KEY_FORMAT)


def today_key(now: Optional[datetime] = None) -> str:
    now = now or now_local()
    return now.strftime(DATE_KEY_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
