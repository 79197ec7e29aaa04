from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import SavePolicyFactory
from .attendance.policies.base import SavePolicy
from .attendance.repository import AttendanceGateway
from .attendance.session import SessionController, SessionRegistry
from .core.constants import DEFAULT_API_BASE_URL, DEFAULT_API_TIMEOUT, DEFAULT_MAX_SESSIONS
from .gateway.http_gateway import APIConfig, HttpAttendanceGateway
from .roster.repository import RosterGateway


@dataclass(frozen=True)
class Container:
    roster_gateway: RosterGateway
    attendance_gateway: AttendanceGateway

    save_policy: SavePolicy
    sessions: SessionRegistry


def build_container(
    *,
    api_config: dict,
    require_all_marked: bool = False,
    max_sessions: int = DEFAULT_MAX_SESSIONS,
    gateway: Optional[object] = None,
) -> Container:
    """Wire gateways, policy and the per-browser session registry.

    ``gateway`` replaces the HTTP client (tests pass an in-memory fake).
    """
    if gateway is None:
        config = APIConfig(
            base_url=str(api_config.get("base_url") or DEFAULT_API_BASE_URL),
            timeout=float(api_config.get("timeout", DEFAULT_API_TIMEOUT)),
        )
        gateway = HttpAttendanceGateway(config)

    save_policy = SavePolicyFactory().for_config(require_all_marked=require_all_marked)

    def new_controller() -> SessionController:
        return SessionController(gateway, gateway, policy=save_policy)

    return Container(
        roster_gateway=gateway,
        attendance_gateway=gateway,
        save_policy=save_policy,
        sessions=SessionRegistry(new_controller, max_sessions=max_sessions),
    )
