"""Class Attendance package.

Browser front-end for daily classroom attendance over a remote storage API.
Organized by feature modules (roster, attendance, gateway) with a thin Flask
controller layer over a session controller and pure reconciliation rules.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
