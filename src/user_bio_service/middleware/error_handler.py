"""Exception handlers producing the API error envelope."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_bio_service.exceptions import ServiceException
from user_bio_service.providers.base import (
    BioGenerationError,
    NoProviderConfiguredError,
    ProviderCallError,
    ProviderError,
    ProviderNotConfiguredError,
)
from user_bio_service.telemetry import get_logger

from .rate_limit import rate_limit_exceeded_handler

logger = get_logger(__name__)


def error_response(
    status_code: int,
    error: str,
    details: Optional[Any] = None,
    request: Optional[Request] = None,
    **extra: Any,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if details:
        content["details"] = details
    content.update(extra)

    headers = {}
    request_id = getattr(request.state, "request_id", None) if request else None
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def provider_error_status(exc: ProviderError) -> int:
    """Map orchestrator failures to server-side status codes."""
    if isinstance(
        exc, (NoProviderConfiguredError, ProviderNotConfiguredError, BioGenerationError)
    ):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, ProviderCallError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_service_exception(request: Request, exc: ServiceException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error_code=exc.error_code,
        error=exc.message,
    )
    return error_response(exc.status_code, exc.message, exc.details or None, request)


async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    status_code = provider_error_status(exc)
    logger.error(
        "Bio provider failure",
        path=request.url.path,
        status_code=status_code,
        provider=exc.provider,
        provider_status=exc.status_code,
        provider_error_code=exc.error_code,
        error=exc.message,
    )
    return error_response(
        status_code,
        exc.message,
        request=request,
        code=exc.error_code,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part != "body"]
        details.append(
            {
                "field": ".".join(loc) or "body",
                "message": error["msg"],
                "value": error.get("input"),
            }
        )
    logger.warning("Validation failed", path=request.url.path, errors=len(details))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"success": False, "error": "Validation failed", "details": details}),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return error_response(
            exc.status_code,
            "Route not found",
            request=request,
            message=f"Cannot {request.method} {request.url.path}",
        )
    return error_response(exc.status_code, str(exc.detail), request=request)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error",
        path=request.url.path,
        method=request.method,
        exception_type=type(exc).__name__,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", request=request
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(ServiceException, handle_service_exception)
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
