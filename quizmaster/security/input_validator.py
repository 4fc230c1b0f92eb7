"""
Input validation and sanitization helpers.

Free-text fields (quiz titles, question text, options, names) pass
through ``sanitize_input`` before they are stored.
"""

import re
from typing import Any

from quizmaster.security.security_logger import SecurityLogger


class InputValidator:
    """
    Input validator for common input types and patterns.
    """

    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    )

    SQL_INJECTION_PATTERNS = [
        r'(\bUNION\s+SELECT\b)',
        r'(\b(OR|AND)\s+\d+\s*=\s*\d+)',
        r'(;\s*DROP\s)',
    ]

    XSS_PATTERNS = [
        r'<script[^>]*>.*?</script>',
        r'javascript:',
        r'<iframe[^>]*>',
    ]

    @classmethod
    def validate_email(cls, email: str) -> bool:
        """
        Validate email address format.

        Args:
            email: Email address to validate

        Returns:
            True if valid, False otherwise
        """
        if not email or not isinstance(email, str):
            return False
        return bool(cls.EMAIL_PATTERN.match(email.strip().lower()))

    @classmethod
    def detect_sql_injection(cls, value: str) -> bool:
        if not value or not isinstance(value, str):
            return False
        return any(re.search(p, value, re.IGNORECASE) for p in cls.SQL_INJECTION_PATTERNS)

    @classmethod
    def detect_xss(cls, value: str) -> bool:
        if not value or not isinstance(value, str):
            return False
        return any(re.search(p, value, re.IGNORECASE | re.DOTALL) for p in cls.XSS_PATTERNS)

    @staticmethod
    def validate_length(value: str, min_length: int = 0, max_length: int = None) -> bool:
        """Check ``min_length <= len(value) <= max_length``."""
        if not isinstance(value, str):
            return False
        if len(value) < min_length:
            return False
        if max_length is not None and len(value) > max_length:
            return False
        return True


def sanitize_input(value: Any, input_type: str = 'text') -> str:
    """
    Sanitize user input based on type.

    Args:
        value: Input value to sanitize
        input_type: Type of input ('text' or 'email')

    Returns:
        Sanitized string. Suspicious patterns are logged, not rejected.
    """
    if value is None:
        return ''

    if not isinstance(value, str):
        value = str(value)

    value = value.strip().replace('\x00', '')

    if input_type == 'email':
        value = value.lower()

    if InputValidator.detect_sql_injection(value):
        SecurityLogger.log_injection_attempt('SQL', value)

    if InputValidator.detect_xss(value):
        SecurityLogger.log_injection_attempt('XSS', value)

    return value
