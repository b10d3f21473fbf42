from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .categories.controller import register as register_categories
from .checkin.controller import register as register_check_in
from .common.http import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_PUBLIC_BASE_URL
from .database.bootstrap import init_storage
from .database.connection import StorageConfig
from .events.controller import register as register_events
from .participants.controller import register as register_participants

logger = logging.getLogger(__name__)

_SETTING_KEYS = (
    "SECRET_KEY",
    "DEBUG",
    "TESTING",
    "STORAGE_BACKEND",
    "SQLITE_PATH",
    "DB_CONFIG",
    "AUTO_INIT_DB",
    "PUBLIC_BASE_URL",
    "LOG_LEVEL",
    "MAX_UPLOAD_BYTES",
)


def _load_settings(overrides: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {key: getattr(module, key) for key in _SETTING_KEYS if hasattr(module, key)}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(config_overrides)

    logging.basicConfig(
        level=settings.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = Flask(__name__, template_folder="templates")
    app.secret_key = settings.get("SECRET_KEY", "dev-secret-key")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.config["PUBLIC_BASE_URL"] = settings.get("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL)
    app.config["MAX_UPLOAD_BYTES"] = int(settings.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))
    app.config["MAX_CONTENT_LENGTH"] = app.config["MAX_UPLOAD_BYTES"] * 2

    storage = StorageConfig.from_settings(settings)
    logger.info("Settings module %s, storage backend %s", settings["SETTINGS_MODULE"], storage.backend.value)

    if settings.get("AUTO_INIT_DB", False):
        init_storage(storage)

    container = build_container(storage=storage)
    app.extensions["container"] = container

    register_error_handlers(app)
    register_events(app, container)
    register_categories(app, container)
    register_participants(app, container)
    register_check_in(app, container)

    return app
