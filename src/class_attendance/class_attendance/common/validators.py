from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_unique(value: str, existing: Iterable[str], field_name: str) -> str:
    if value in set(existing):
        raise ValidationError(f"{field_name} {value!r} already exists")
    return value
