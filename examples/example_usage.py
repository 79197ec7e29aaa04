"""Example: drive the session controller directly (no Flask).

Controllers stay thin; the reconciliation rules live in the session layer.
"""

import asyncio
import importlib

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container


async def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)
    ctrl = container.sessions.get(container.sessions.new_token())

    await ctrl.load_classes()
    print(ctrl.class_name, ctrl.date_key, ctrl.state.value)
    for record in ctrl.records:
        print(record.roll, record.name, record.status.value or "-")


if __name__ == "__main__":
    asyncio.run(main())
