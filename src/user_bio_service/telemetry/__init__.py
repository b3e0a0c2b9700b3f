"""Telemetry module for logging and metrics."""

from user_bio_service.telemetry.logger import RequestContext, get_logger, setup_logging

__all__ = ["get_logger", "setup_logging", "RequestContext"]
