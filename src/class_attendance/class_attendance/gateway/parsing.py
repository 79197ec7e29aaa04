"""Normalize storage API payloads into domain records.

The API is loosely typed: rolls may come back as numbers, statuses as null.
Anything we cannot turn into a total record is rejected here so the session
code never sees partial shapes.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

from ..attendance.model import AttendanceRecord
from ..core.enums import MarkStatus
from ..core.exceptions import MalformedResponseError, ValidationError
from ..roster.model import Student

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_class_names(payload: Any) -> list[str]:
    items = _require_list(payload, "classes")
    names: list[str] = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("className", item.get("name"))
        if not isinstance(item, str) or not item.strip():
            raise MalformedResponseError(f"Invalid class entry: {item!r}")
        names.append(item.strip())
    return _unique(names, key=lambda n: n, what="class")


def parse_students(payload: Any) -> list[Student]:
    items = _require_list(payload, "students")
    students = [Student(roll=_roll(item), name=_text(item, "name")) for item in items]
    return _unique(students, key=lambda s: s.roll, what="student")


def parse_attendance(payload: Any) -> list[AttendanceRecord]:
    if payload is None:
        return []
    if isinstance(payload, dict) and "records" in payload:
        payload = payload["records"]

    items = _require_list(payload, "attendance")
    records = []
    for item in items:
        try:
            status = MarkStatus.parse(item.get("status") if isinstance(item, dict) else None)
        except ValidationError as e:
            raise MalformedResponseError(str(e)) from None
        records.append(AttendanceRecord(roll=_roll(item), name=_text(item, "name"), status=status))
    return _unique(records, key=lambda r: r.roll, what="attendance record")


def _require_list(payload: Any, what: str) -> list:
    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a list of {what}, got {type(payload).__name__}")
    return payload


def _roll(item: Any) -> str:
    if not isinstance(item, dict):
        raise MalformedResponseError(f"Expected an object, got {item!r}")
    roll = item.get("roll")
    if isinstance(roll, bool) or not isinstance(roll, (str, int)):
        raise MalformedResponseError(f"Missing roll in {item!r}")
    roll = str(roll).strip()
    if not roll:
        raise MalformedResponseError(f"Empty roll in {item!r}")
    return roll


def _text(item: dict, key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value).strip()


def _unique(items: Iterable[T], *, key: Callable[[T], str], what: str) -> list[T]:
    seen: set[str] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            logger.warning("Dropping duplicate %s %r from API response", what, k)
            continue
        seen.add(k)
        out.append(item)
    return out
