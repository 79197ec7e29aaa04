from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..model import AttendanceRecord


class SavePolicy(ABC):
    """Strategy Pattern: decide whether a session may be persisted as-is."""

    @abstractmethod
    def check(self, records: Sequence[AttendanceRecord]) -> None:
        """Raise ValidationError when the records must not be saved."""

        raise NotImplementedError
