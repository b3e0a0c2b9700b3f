"""Custom exceptions for the User Bio Service."""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for request-level failures."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.status_code = status_code
        self.details = details or {}


class NotFoundException(ServiceException):
    """Requested record does not exist."""

    def __init__(self, message: str = "Not found", **kwargs):
        super().__init__(message, error_code="NOT_FOUND", status_code=404, **kwargs)


class ConflictException(ServiceException):
    """Record conflicts with an existing one."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, error_code="CONFLICT", status_code=409, **kwargs)
        if field:
            self.details["conflictField"] = field
            self.details["conflictValue"] = value


class ValidationException(ServiceException):
    """Validation error."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="VALIDATION_ERROR", status_code=400, **kwargs)
        if field:
            self.details["field"] = field


class DatabaseUnavailableException(ServiceException):
    """The document database has not been initialised."""

    def __init__(self, message: str = "Database is not connected", **kwargs):
        super().__init__(message, error_code="DATABASE_UNAVAILABLE", status_code=503, **kwargs)


__all__ = [
    "ServiceException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "DatabaseUnavailableException",
]
