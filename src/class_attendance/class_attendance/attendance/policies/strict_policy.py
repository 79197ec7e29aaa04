from __future__ import annotations

from typing import Sequence

from ...core.enums import MarkStatus
from ...core.exceptions import ValidationError
from ..model import AttendanceRecord
from .base import SavePolicy


class StrictSavePolicy(SavePolicy):
    """Every student has to be marked present or absent before saving."""

    def check(self, records: Sequence[AttendanceRecord]) -> None:
        missing = [r.roll for r in records if r.status == MarkStatus.UNMARKED]
        if missing:
            raise ValidationError(f"Mark every student before saving (unmarked rolls: {', '.join(missing)})")
