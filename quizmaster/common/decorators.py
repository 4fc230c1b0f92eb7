from functools import wraps

from flask import request
from flask_login import current_user

from quizmaster.common.errors import ForbiddenError, UnauthorizedError
from quizmaster.security.security_logger import SecurityLogger


def roles_required(*roles):
    """Decorator to require one of the given roles for a route."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                SecurityLogger.log_unauthorized_access(request.path)
                raise UnauthorizedError("Authentication required")
            if current_user.role not in roles:
                SecurityLogger.log_unauthorized_access(request.path, current_user.id)
                raise ForbiddenError(
                    f"This action requires one of the roles: {', '.join(roles)}"
                )
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def teacher_required(f):
    """Decorator to require teacher or admin role for a route."""
    return roles_required("TEACHER", "ADMIN")(f)


def student_required(f):
    """Decorator to require student role for a route."""
    return roles_required("STUDENT")(f)
