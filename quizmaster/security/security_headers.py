"""
Security headers module.

Adds security headers to every API response.
"""

from flask import current_app


class SecurityHeaders:
    """
    Security headers middleware.

    The API only serves JSON, so the content security policy is locked
    down to 'self' with no inline scripts.
    """

    CONTENT_SECURITY_POLICY = (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data: https:; "
        "script-src 'self'; "
        "frame-ancestors 'none'; "
        "base-uri 'self';"
    )

    @staticmethod
    def init_app(app):
        """
        Initialize security headers for the Flask app.

        Args:
            app: Flask application instance
        """
        @app.after_request
        def add_security_headers(response):
            response.headers['Content-Security-Policy'] = SecurityHeaders.CONTENT_SECURITY_POLICY
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-Frame-Options'] = 'DENY'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            response.headers['Permissions-Policy'] = (
                "geolocation=(), microphone=(), camera=(), payment=(), usb=()"
            )

            # Force HTTPS only in production
            if current_app.config.get('APP_ENV') == 'production':
                response.headers['Strict-Transport-Security'] = (
                    'max-age=31536000; includeSubDomains'
                )

            response.headers.pop('Server', None)
            return response
