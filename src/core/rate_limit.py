"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode


limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

INVITE_RATE_LIMIT = settings.invite_rate_limit
ACCEPT_RATE_LIMIT = settings.accept_rate_limit


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Handle rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return ORJSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Rate limit exceeded: {detail}",
            "details": {
                "limit": str(detail),
                "path": request.url.path,
            },
        },
    )
