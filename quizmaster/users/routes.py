"""Profile endpoints for the signed-in user."""
from flask import current_app, jsonify
from flask_login import current_user, login_required

from quizmaster import db
from quizmaster.auth.utils import hash_password, validate_password, verify_password
from quizmaster.common.errors import ValidationError, get_json_object
from quizmaster.security import SecurityLogger, sanitize_input
from quizmaster.users import users_bp


@users_bp.route("/me", methods=["GET"])
@login_required
def get_me():
    return jsonify(current_user.to_dict()), 200


@users_bp.route("/me", methods=["PUT", "PATCH"])
@login_required
def update_me():
    """
    Update the caller's profile.

    Request body (all optional):
    {
        "name": "New Name",
        "current_password": "old-password",  // required with new_password
        "new_password": "new-password"
    }
    """
    data = get_json_object()
    user = current_user._get_current_object()

    if "name" in data:
        name = sanitize_input(data.get("name"))
        if not name:
            raise ValidationError("name must not be empty")
        user.name = name

    if "new_password" in data:
        current_password = data.get("current_password") or ""
        if not isinstance(current_password, str):
            raise ValidationError("current_password must be a string")
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("current_password is incorrect")
        ok, error = validate_password(data.get("new_password"))
        if not ok:
            raise ValidationError(error)
        user.password_hash = hash_password(data["new_password"])
        SecurityLogger.log_password_change(user.id, user.email)

    db.session.commit()
    current_app.logger.info(f"Profile updated: user_id={user.id}")
    return jsonify(user.to_dict()), 200
