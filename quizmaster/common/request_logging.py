"""Per-request access logging."""
import logging
import time

from flask import Flask, g, request
from flask_login import current_user


def configure_logging(app: Flask) -> None:
    """Set the app logger level and a single stream handler format."""
    level = getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO)
    app.logger.setLevel(level)
    for handler in app.logger.handlers:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        ))


def init_request_logging(app: Flask) -> None:
    """Log method, path, status, duration and actor for every request."""

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        duration_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        user_id = current_user.id if current_user.is_authenticated else "anonymous"
        message = (
            f"{request.method} {request.path} {response.status_code} "
            f"{duration_ms:.1f}ms user={user_id} ip={request.remote_addr}"
        )
        if response.status_code >= 500:
            app.logger.error(message)
        else:
            app.logger.info(message)
        return response
