from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord, SavedMark


class AttendanceGateway(Protocol):
    def fetch_attendance(self, class_name: str, date_key: str) -> Sequence[AttendanceRecord]:
        """Saved records for the date; an empty sequence means nothing was recorded yet."""

        raise NotImplementedError

    def save_attendance(self, class_name: str, date_key: str, records: Sequence[SavedMark]) -> None:
        raise NotImplementedError

    def export_csv(self, class_name: str) -> bytes:
        raise NotImplementedError
