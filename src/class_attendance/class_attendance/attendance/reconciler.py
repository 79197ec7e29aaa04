"""Rules that derive and keep an attendance session consistent with the roster.

All functions are pure: they take a session (a tuple of records) and return a
new one. Nothing here talks to the storage API.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MarkStatus
from ..core.exceptions import ValidationError
from ..roster.model import Student
from .model import AttendanceRecord, SavedMark
from .policies.base import SavePolicy
from .policies.lenient_policy import LenientSavePolicy

Session = tuple[AttendanceRecord, ...]

MARKABLE = frozenset({MarkStatus.PRESENT, MarkStatus.ABSENT})


def initialize_session(roster: Sequence[Student], saved: Sequence[AttendanceRecord]) -> Session:
    """Build the working set for one (class, date).

    A saved record wins over the roster once it exists, even if students were
    added after it was saved.
    """
    if saved:
        return tuple(saved)
    return tuple(AttendanceRecord(roll=s.roll, name=s.name, status=MarkStatus.UNMARKED) for s in roster)


def set_status(session: Session, roll: str, status: MarkStatus) -> Session:
    if status not in MARKABLE:
        raise ValidationError("Status must be P (present) or A (absent)")

    return tuple(
        AttendanceRecord(roll=r.roll, name=r.name, status=status) if r.roll == roll else r
        for r in session
    )


def merge_student(session: Session, student: Student) -> Session:
    """Append a newly registered student without touching marks already entered."""
    if any(r.roll == student.roll for r in session):
        return session
    return session + (AttendanceRecord(roll=student.roll, name=student.name, status=MarkStatus.UNMARKED),)


def prepare_save(session: Session, policy: Optional[SavePolicy] = None) -> list[SavedMark]:
    (policy or LenientSavePolicy()).check(session)
    return [SavedMark(roll=r.roll, status=r.status) for r in session]
