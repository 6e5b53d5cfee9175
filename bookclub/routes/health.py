"""Lightweight health probe endpoint.

Exposes /healthz returning a fast 200 for container / LB health checks.
"""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bookclub import config
from bookclub.db.engine import app_session
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.health")

bp = Blueprint("health", __name__)


@bp.route("/healthz", methods=["GET"])
def healthz():
    db_ok = True
    try:
        with app_session() as s:
            s.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:  # pragma: no cover
        db_ok = False
        LOG.debug("Health DB probe failed: %s", exc)
    status_code = 200 if db_ok else 500
    return jsonify({
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
        "remote_configured": config.script_url() is not None,
        "version": config.metadata()["version"],
    }), status_code


def register_health(app: Any) -> None:
    if getattr(app, "_health_bp", None):  # idempotent
        return
    app.register_blueprint(bp)
    setattr(app, "_health_bp", bp)
    LOG.debug("health blueprint registered")


__all__ = ["register_health"]
