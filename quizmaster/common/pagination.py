"""Page/limit parsing and paginated query helpers."""
import math

from flask import current_app, request

from quizmaster.common.errors import ValidationError


def parse_page_args() -> tuple[int, int]:
    """Read ``page`` and ``limit`` from the query string."""
    page = _parse_positive_int("page", 1)
    limit = _parse_positive_int("limit", current_app.config["DEFAULT_PAGE_SIZE"])
    max_limit = current_app.config["MAX_PAGE_SIZE"]
    if limit > max_limit:
        raise ValidationError(f"limit must not exceed {max_limit}")
    return page, limit


def _parse_positive_int(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
    if value < 1:
        raise ValidationError(f"{name} must be at least 1")
    return value


def paginate(query, page: int, limit: int) -> tuple[list, dict]:
    """
    Apply offset/limit to a query.

    Returns:
        Tuple of (items, meta) where meta holds total, page, limit and total_pages.
    """
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    meta = {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }
    return items, meta
