from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class MarkStatus(str, Enum):
    """Mark stored per student and date. Empty string means not yet marked."""

    PRESENT = "P"
    ABSENT = "A"
    UNMARKED = ""

    @classmethod
    def parse(cls, value) -> "MarkStatus":
        if isinstance(value, cls):
            return value
        raw = "" if value is None else str(value).strip().upper()
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {value!r}") from None


class SessionState(str, Enum):
    """Lifecycle of the working attendance set for one (class, date)."""

    EMPTY = "EMPTY"
    LOADED = "LOADED"
    DIRTY = "DIRTY"
    SAVED = "SAVED"
