from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.repository import AttendanceBackend
from .auth.controller import register as register_auth
from .container import AppSettings, build_container
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, backend: Optional[AttendanceBackend] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app_settings = AppSettings.from_module(settings)
    if app_settings.demo_mode and backend is None:
        logger.warning("DEMO_MODE is on: serving sandbox attendance data, not the academy backend")
    logger.info("settings=%s api=%s", settings_module, app_settings.api_base_url)

    container = build_container(settings=app_settings, backend=backend)
    app.extensions["academy_container"] = container

    register_auth(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
