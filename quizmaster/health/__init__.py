from flask import Blueprint

health_bp = Blueprint("health", __name__)

from quizmaster.health import routes  # noqa: E402,F401
