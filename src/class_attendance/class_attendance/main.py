from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_MAX_SESSIONS, DEFAULT_NOTICE_SECONDS

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    api_config = getattr(settings, "API_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["NOTICE_SECONDS"] = int(getattr(settings, "NOTICE_SECONDS", DEFAULT_NOTICE_SECONDS))
    app.config["REQUIRE_ALL_MARKED"] = bool(getattr(settings, "REQUIRE_ALL_MARKED", False))
    app.config["MAX_SESSIONS"] = int(getattr(settings, "MAX_SESSIONS", DEFAULT_MAX_SESSIONS))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    if container is None:
        container = build_container(
            api_config=api_config,
            require_all_marked=app.config["REQUIRE_ALL_MARKED"],
            max_sessions=app.config["MAX_SESSIONS"],
        )

    register_attendance(app, container)

    return app
