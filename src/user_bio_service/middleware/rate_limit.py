"""Per-IP rate limits."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from user_bio_service.config import settings
from user_bio_service.telemetry import get_logger

logger = get_logger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_api],
    enabled=settings.rate_limit_enabled,
)

create_user_limit = limiter.limit(
    settings.rate_limit_create_user,
    error_message="Too many user creation attempts from this IP, please try again later.",
)
ai_service_limit = limiter.limit(
    settings.rate_limit_ai,
    error_message="Too many AI service requests from this IP, please try again later.",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return the standard error envelope for rate limit violations."""
    logger.warning(
        "Rate limit exceeded",
        ip=get_remote_address(request),
        path=request.url.path,
        limit=str(exc.limit.limit) if exc.limit else None,
    )
    response = JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": exc.detail
            if exc.limit and exc.limit.error_message
            else "Too many requests from this IP, please try again later.",
        },
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
