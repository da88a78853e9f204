from __future__ import annotations

import importlib
import logging
import os

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import build_container
from .voice.controller import register as register_voice

logger = logging.getLogger(__name__)


def create_app(**overrides) -> Flask:
    """Build the Flask app; keyword overrides are passed to ``build_container``."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if app.config["DEBUG"]:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s backend=%s db=%s@%s:%s/%s",
            settings_module,
            getattr(settings, "STORE_BACKEND", "memory"),
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    container = build_container(settings=settings, **overrides)
    app.extensions["voice_attendance"] = container

    register_voice(app, container)

    return app


def run() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")))


if __name__ == "__main__":
    run()
