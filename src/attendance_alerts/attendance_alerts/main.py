from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import CONSECUTIVE_ABSENCE_THRESHOLD, MONTHLY_ABSENCE_THRESHOLD
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(
        db_config=db_config,
        consecutive_threshold=int(getattr(settings, "ALERT_CONSECUTIVE_THRESHOLD", CONSECUTIVE_ABSENCE_THRESHOLD)),
        monthly_threshold=int(getattr(settings, "ALERT_MONTHLY_THRESHOLD", MONTHLY_ABSENCE_THRESHOLD)),
    )

    register_reports(app, container)

    return app
