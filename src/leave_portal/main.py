from __future__ import annotations

import importlib
import logging
from types import SimpleNamespace
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .limits.controller import register as register_limits
from .notifications.controller import register as register_notifications
from .requests.controller import register as register_requests
from .roster.controller import register as register_roster
from .swaps.controller import register as register_swaps
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> SimpleNamespace:
    module = importlib.import_module(get_settings_module())
    values = {k: v for k, v in vars(module).items() if k.isupper()}
    values.update(overrides or {})
    values["SETTINGS_MODULE"] = module.__name__
    return SimpleNamespace(**values)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(overrides)

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings)
    logger.info("settings=%s store=%s", settings.SETTINGS_MODULE, container.conn.backend)

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn)
        logger.debug("Schema ready (tables=%d)", len(list_tables(container.conn)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_users(container.conn)

    app.extensions["leave_portal"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_requests(app, container)
    register_swaps(app, container)
    register_roster(app, container)
    register_limits(app, container)
    register_attendance(app, container)
    register_notifications(app, container)

    return app
