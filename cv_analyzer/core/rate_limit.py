from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from cv_analyzer.core.config import settings


def upload_rate_limit_key(request: Request) -> str:
    """Throttle by caller identity when known, otherwise by client address."""
    user_id = (request.headers.get("x-user-id") or "").strip()
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=upload_rate_limit_key, enabled=settings.upload_rate_limit_enabled)


def upload_rate_limit():
    return limiter.limit(settings.upload_rate_limit)
