from flask import Blueprint

# Blueprint for authentication related endpoints
auth_bp = Blueprint("auth", __name__)

# Import routes so that they are registered with the blueprint
from quizmaster.auth import routes  # noqa: E402,F401
