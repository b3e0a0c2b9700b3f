"""HTTP middleware and exception handlers."""

from .error_handler import register_exception_handlers
from .rate_limit import ai_service_limit, create_user_limit, limiter
from .request_logger import RequestLoggingMiddleware

__all__ = [
    "register_exception_handlers",
    "limiter",
    "create_user_limit",
    "ai_service_limit",
    "RequestLoggingMiddleware",
]
