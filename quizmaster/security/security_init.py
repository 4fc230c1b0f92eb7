"""Wires the security package into an app."""

from flask import Flask
from .rate_limiter import RateLimiter
from .security_headers import SecurityHeaders


def init_security(app: Flask):
    """
    Install response headers and give the app its own rate limiter.

    The limiter lives in ``app.extensions`` so separate apps (one per test)
    never share request counts.
    """
    SecurityHeaders.init_app(app)
    app.extensions["rate_limiter"] = RateLimiter()

    app.logger.info(
        f"Security initialized (rate limiting {'on' if app.config.get('RATE_LIMIT_ENABLED', True) else 'off'})"
    )
