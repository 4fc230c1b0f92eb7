"""
Rate limiting module to slow down brute force attempts on the auth endpoints.

Request timestamps are kept in memory per identifier (IP address or user)
and checked against a sliding window.
"""

from functools import wraps
from flask import request, current_app
from flask_login import current_user
from collections import defaultdict
import threading
import time

from quizmaster.common.errors import RateLimitError
from quizmaster.security.security_logger import SecurityLogger


class RateLimiter:
    """
    Rate limiter that tracks requests per IP address or user.

    Uses a sliding window algorithm to track requests within a time period.
    """

    def __init__(self, cleanup_interval: int = 3600):
        self._storage = defaultdict(list)
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = time.time()

    def _cleanup_old_entries(self, now: float):
        """Drop identifiers whose timestamps are all older than the cleanup interval."""
        if now - self._last_cleanup < self._cleanup_interval:
            return
        cutoff = now - self._cleanup_interval
        for key in list(self._storage):
            self._storage[key] = [ts for ts in self._storage[key] if ts > cutoff]
            if not self._storage[key]:
                del self._storage[key]
        self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int) -> tuple[bool, int]:
        """
        Check if a request is allowed based on rate limit.

        Args:
            identifier: Unique identifier (IP address or user ID)
            max_requests: Maximum number of requests allowed
            window_seconds: Time window in seconds

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        now = time.time()
        cutoff = now - window_seconds

        with self._lock:
            self._cleanup_old_entries(now)
            timestamps = self._storage[identifier]
            timestamps[:] = [ts for ts in timestamps if ts > cutoff]

            if len(timestamps) >= max_requests:
                return False, 0

            timestamps.append(now)
            return True, max_requests - len(timestamps)

    def reset(self, identifier: str = None):
        """Reset rate limit for one identifier, or for everyone."""
        with self._lock:
            if identifier is None:
                self._storage.clear()
            else:
                self._storage.pop(identifier, None)


def get_rate_limiter() -> RateLimiter:
    """Return the limiter attached to the current app."""
    return current_app.extensions["rate_limiter"]


def _identifier(per: str) -> str:
    if per == 'user' and current_user.is_authenticated:
        return f"user:{current_user.id}"
    ip = request.remote_addr or request.environ.get('REMOTE_ADDR', 'unknown')
    return f"ip:{ip}"


def rate_limit(max_requests: int = 10, window_seconds: int = 60, per: str = 'ip',
               error_message: str = "Rate limit exceeded. Please try again later."):
    """
    Decorator to rate limit a route.

    Args:
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds
        per: Rate limit per 'ip' or 'user'
        error_message: Error message to return when limit exceeded

    Example:
        @auth_bp.route('/login', methods=['POST'])
        @rate_limit(max_requests=5, window_seconds=60)  # 5 requests per minute
        def login():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_app.config.get("RATE_LIMIT_ENABLED", True):
                return f(*args, **kwargs)

            identifier = f"{_identifier(per)}:{request.endpoint}"
            is_allowed, remaining = get_rate_limiter().is_allowed(
                identifier, max_requests, window_seconds
            )
            reset_at = str(int(time.time()) + window_seconds)

            if not is_allowed:
                SecurityLogger.log_rate_limit_exceeded(identifier, request.path)
                raise RateLimitError(error_message, headers={
                    'Retry-After': str(window_seconds),
                    'X-RateLimit-Limit': str(max_requests),
                    'X-RateLimit-Remaining': '0',
                    'X-RateLimit-Reset': reset_at,
                })

            response = current_app.make_response(f(*args, **kwargs))
            response.headers['X-RateLimit-Limit'] = str(max_requests)
            response.headers['X-RateLimit-Remaining'] = str(remaining)
            response.headers['X-RateLimit-Reset'] = reset_at
            return response

        return decorated_function
    return decorator
