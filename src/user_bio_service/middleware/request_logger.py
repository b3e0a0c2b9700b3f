"""Request ID assignment and request/response logging."""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from user_bio_service.telemetry import RequestContext, get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its outcome."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or None

        with RequestContext(request_id) as context:
            request.state.request_id = context.request_id
            client_ip = request.client.host if request.client else None

            logger.info(
                "Incoming request",
                method=request.method,
                path=request.url.path,
                ip=client_ip,
                user_agent=request.headers.get("user-agent"),
            )

            start_time = time.perf_counter()
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = context.request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            log = logger.error if response.status_code >= 400 else logger.info
            log(
                "Request failed" if response.status_code >= 400 else "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                response_time_ms=round(process_time * 1000, 2),
                ip=client_ip,
            )

        return response
