from typing import Optional

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.hash import bcrypt

from quizmaster.auth.models import User
from quizmaster.security.input_validator import InputValidator
from quizmaster.security.security_logger import SecurityLogger


ACCESS_TOKEN_SALT = "quizmaster-access-token"


def _truncate_password(plain_password: str) -> str:
    """Helper to consistently truncate password to its first 72 UTF-8 bytes."""
    password_bytes = plain_password.encode('utf-8')[:72]
    return password_bytes.decode('utf-8', errors='ignore')


def hash_password(plain_password: str) -> str:
    """
    Hash password using bcrypt. It is truncated to the first 72 bytes
    of its UTF-8 encoding before hashing.
    """
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    return bcrypt.using(rounds=rounds).hash(_truncate_password(plain_password))


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a password against a hash, using the same truncation as hash_password."""
    return bcrypt.verify(_truncate_password(plain_password), password_hash)


def is_valid_email(email: str) -> bool:
    return InputValidator.validate_email(email)


def validate_password(password: str) -> tuple[bool, str | None]:
    """
    Basic server-side password validation.
    Returns (is_valid, error_message).
    """
    min_length = current_app.config["MIN_PASSWORD_LENGTH"]
    if not isinstance(password, str) or len(password) < min_length:
        return False, f"Password must be at least {min_length} characters long"
    return True, None


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=ACCESS_TOKEN_SALT)


def issue_access_token(user: User) -> str:
    """Sign a bearer token carrying the user's id, email and role."""
    return _serializer().dumps({"sub": user.id, "email": user.email, "role": user.role})


def decode_access_token(token: str) -> Optional[dict]:
    """
    Verify a bearer token.

    Returns:
        The payload, or None if the token is malformed, tampered or expired.
    """
    try:
        return _serializer().loads(token, max_age=current_app.config["ACCESS_TOKEN_TTL_SECONDS"])
    except SignatureExpired:
        SecurityLogger.log_invalid_token("expired")
        return None
    except BadSignature:
        SecurityLogger.log_invalid_token("bad signature")
        return None
