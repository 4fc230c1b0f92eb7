"""Liveness and readiness probes. No authentication."""
from datetime import datetime

from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from quizmaster import db
from quizmaster.health import health_bp


def _database_status() -> str:
    try:
        db.session.execute(text("SELECT 1"))
        return "up"
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Health check: database unreachable: {e}")
        return "down"


@health_bp.route("", methods=["GET"])
@health_bp.route("/ready", methods=["GET"])
def readiness():
    database = _database_status()
    status_code = 200 if database == "up" else 503
    return jsonify({
        "status": "ok" if database == "up" else "error",
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
    }), status_code


@health_bp.route("/live", methods=["GET"])
def liveness():
    return jsonify({"status": "ok", "timestamp": datetime.utcnow().isoformat()}), 200
