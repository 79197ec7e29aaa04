from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import MarkStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's mark inside an attendance session."""

    roll: str
    name: str
    status: MarkStatus = MarkStatus.UNMARKED


@dataclass(frozen=True)
class SavedMark:
    """Persisted shape of a record. Name is roster-owned and never sent."""

    roll: str
    status: MarkStatus

    def to_payload(self) -> dict:
        return {"roll": self.roll, "status": self.status.value}


@dataclass(frozen=True)
class Selection:
    """Which (class, date) a session belongs to, tagged with the request that loaded it."""

    class_name: str
    date_key: str
    tag: int
