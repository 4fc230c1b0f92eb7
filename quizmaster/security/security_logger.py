"""
Audit trail for authentication and access-control events.

Every line is prefixed with ``SECURITY:`` and carries the client IP and
request path so it can be grepped out of the access log.
"""
import logging

from flask import current_app, request


MAX_LOGGED_VALUE_LENGTH = 100


def _emit(level: int, event: str, **fields) -> None:
    details = " ".join(f"{key}={value}" for key, value in fields.items())
    current_app.logger.log(
        level,
        f"SECURITY: {event} {details} ip={request.remote_addr} path={request.path}".rstrip(),
    )


class SecurityLogger:
    """Named security events, one static method per event."""

    @staticmethod
    def log_failed_login(email: str, reason: str = "Invalid credentials"):
        _emit(logging.WARNING, "login_failed", email=email, reason=repr(reason))

    @staticmethod
    def log_successful_login(user_id: int, email: str):
        _emit(logging.INFO, "login_succeeded", user_id=user_id, email=email)

    @staticmethod
    def log_invalid_token(reason: str):
        """Bearer token that failed signature or expiry checks."""
        _emit(logging.WARNING, "token_rejected", reason=repr(reason))

    @staticmethod
    def log_rate_limit_exceeded(identifier: str, endpoint: str):
        _emit(logging.WARNING, "rate_limited", identifier=identifier, endpoint=endpoint)

    @staticmethod
    def log_injection_attempt(input_type: str, value: str):
        """
        Suspicious free-text input. The request is not rejected.

        Args:
            input_type: "SQL" or "XSS"
            value: The offending input, cut to MAX_LOGGED_VALUE_LENGTH characters
        """
        _emit(logging.WARNING, "suspicious_input", kind=input_type,
              value=repr(value[:MAX_LOGGED_VALUE_LENGTH]))

    @staticmethod
    def log_unauthorized_access(resource: str, user_id: int = None):
        """Missing credentials (``user_id`` None) or a role/ownership refusal."""
        _emit(logging.WARNING, "access_denied", resource=resource,
              user_id=user_id if user_id is not None else "anonymous")

    @staticmethod
    def log_password_change(user_id: int, email: str):
        _emit(logging.INFO, "password_changed", user_id=user_id, email=email)
