"""
Error taxonomy and JSON error handlers.

Services raise the exceptions below; the handlers registered by
``register_error_handlers`` turn them into a uniform JSON body.
"""
from datetime import datetime

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from quizmaster import db


class QuizmasterError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str = None):
        super().__init__(message or self.error)
        self.message = message or self.error


class ValidationError(QuizmasterError):
    """Malformed or out-of-range input."""

    status_code = 400
    error = "Bad Request"


class BadRequestError(QuizmasterError):
    """State-machine violation on a submission (already started, already submitted, stale question)."""

    status_code = 400
    error = "Bad Request"


class UnauthorizedError(QuizmasterError):
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(QuizmasterError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(QuizmasterError):
    status_code = 404
    error = "Not Found"


class ConflictError(QuizmasterError):
    status_code = 409
    error = "Conflict"


class RateLimitError(QuizmasterError):
    status_code = 429
    error = "Too Many Requests"

    def __init__(self, message: str = None, headers: dict = None):
        super().__init__(message)
        self.headers = headers or {}


def error_response(status_code: int, error: str, message: str):
    """Build the JSON error body shared by every handler."""
    response = jsonify({
        "success": False,
        "status_code": status_code,
        "error": error,
        "message": message,
        "path": request.path,
        "timestamp": datetime.utcnow().isoformat(),
    })
    response.status_code = status_code
    return response


def register_error_handlers(app: Flask) -> None:
    """Attach JSON error handlers to the app."""

    @app.errorhandler(QuizmasterError)
    def handle_quizmaster_error(exc: QuizmasterError):
        db.session.rollback()
        if exc.status_code >= 500:
            current_app.logger.error(f"{request.method} {request.path}: {exc.message}")
        response = error_response(exc.status_code, exc.error, exc.message)
        response.headers.update(getattr(exc, "headers", {}))
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        current_app.logger.warning(f"{exc.code} error: {request.method} {request.path}")
        return error_response(exc.code, exc.name, exc.description or exc.name)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error on {request.method} {request.path}")
        message = str(exc) or "Internal server error"
        # Don't expose internal error details in production
        if current_app.config.get("APP_ENV") == "production":
            message = "An unexpected error occurred"
        return error_response(500, "Internal Server Error", message)


def get_json_object() -> dict:
    """The request's JSON body as a dict; a missing body reads as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
