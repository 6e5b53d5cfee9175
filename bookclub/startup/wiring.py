"""Application initialization / wiring.

Orchestrates: config, DB init, schema validation, route registration.
"""
from __future__ import annotations

from typing import Any

from flask import Flask

from bookclub import config
from bookclub.db import init_engine_once
from bookclub.routes import register_api, register_health
from bookclub.services.schema import validate_schemas
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.startup")


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = config.secret_key()
    validate_schemas()
    LOG.debug("Collection schemas validated")
    init_engine_once()
    LOG.debug("DB engine initialized")
    register_api(app)
    register_health(app)
    runtime = config.summarize_runtime_config()
    if not runtime["remote_configured"]:
        LOG.warning("BOOKCLUB_SCRIPT_URL not set; running on local mirror only")
    LOG.info("App startup wiring complete %s", runtime)


def create_app() -> Flask:
    app = Flask("bookclub")
    init_app(app)
    return app


__all__ = ["init_app", "create_app"]
