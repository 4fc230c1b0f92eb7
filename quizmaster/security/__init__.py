"""
Request hardening for the API: auth rate limits, response headers,
free-text sanitising and the security audit log.
"""
from .rate_limiter import RateLimiter, rate_limit, get_rate_limiter
from .input_validator import InputValidator, sanitize_input
from .security_headers import SecurityHeaders
from .security_logger import SecurityLogger
from .security_init import init_security

__all__ = [
    'RateLimiter',
    'rate_limit',
    'get_rate_limiter',
    'InputValidator',
    'sanitize_input',
    'SecurityHeaders',
    'SecurityLogger',
    'init_security',
]
