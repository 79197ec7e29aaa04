from __future__ import annotations

from dataclasses import dataclass

from .policies.base import SavePolicy
from .policies.lenient_policy import LenientSavePolicy
from .policies.strict_policy import StrictSavePolicy


@dataclass
class SavePolicyFactory:
    """Factory Pattern: choose the save policy from configuration."""

    def for_config(self, *, require_all_marked: bool) -> SavePolicy:
        if require_all_marked:
            return StrictSavePolicy()
        return LenientSavePolicy()
