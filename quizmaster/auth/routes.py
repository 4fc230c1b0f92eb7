from flask import current_app, jsonify
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from quizmaster import db
from quizmaster.auth import auth_bp
from quizmaster.auth.models import ROLES, User
from quizmaster.auth.utils import (
    hash_password,
    is_valid_email,
    issue_access_token,
    validate_password,
    verify_password,
)
from quizmaster.common.errors import ConflictError, UnauthorizedError, ValidationError, get_json_object
from quizmaster.security import SecurityLogger, rate_limit, sanitize_input


def _auth_response(user: User, status_code: int):
    return jsonify({
        "user": user.to_dict(),
        "access_token": issue_access_token(user),
    }), status_code


@auth_bp.route("/register", methods=["POST"])
@rate_limit(max_requests=3, window_seconds=3600,
            error_message="Too many registration attempts. Please try again later.")
def register():
    data = get_json_object()

    email = sanitize_input(data.get("email"), "email")
    password = data.get("password") or ""
    name = sanitize_input(data.get("name"))
    role = str(data.get("role") or "STUDENT").strip().upper()

    if not email or not password or not name:
        raise ValidationError("Email, password, and name are required")

    if not is_valid_email(email):
        raise ValidationError("Please provide a valid email address")

    if role not in ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(ROLES)}")

    ok, error = validate_password(password)
    if not ok:
        raise ValidationError(error)

    if User.query.filter_by(email=email).first():
        raise ConflictError("Email already in use")

    user = User(email=email, password_hash=hash_password(password), name=name, role=role)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        raise ConflictError("Email already in use")

    current_app.logger.info(f"User registered: id={user.id}, role={user.role}")
    return _auth_response(user, 201)


@auth_bp.route("/login", methods=["POST"])
@rate_limit(max_requests=5, window_seconds=60,
            error_message="Too many login attempts. Please try again in a minute.")
def login():
    data = get_json_object()
    email = sanitize_input(data.get("email"), "email")
    password = data.get("password") or ""

    if not isinstance(password, str):
        raise ValidationError("password must be a string")

    if not email or not password:
        raise ValidationError("Email and password are required")

    if not is_valid_email(email):
        raise ValidationError("Please provide a valid email address")

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        SecurityLogger.log_failed_login(email)
        raise UnauthorizedError("Invalid credentials")

    SecurityLogger.log_successful_login(user.id, user.email)
    return _auth_response(user, 201)


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_dict()), 200
