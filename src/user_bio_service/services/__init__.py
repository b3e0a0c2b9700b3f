"""Services module for business logic."""

from .bio_orchestrator import BioOrchestrator, ServiceStatus
from .retry_handler import RetryHandler
from .user_service import UserService

__all__ = ["BioOrchestrator", "ServiceStatus", "RetryHandler", "UserService"]
