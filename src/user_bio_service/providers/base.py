"""
Base provider abstract class, request model and error taxonomy for bio providers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Status codes and provider error codes that signal rejected credentials.
AUTH_STATUS_CODES = frozenset({401, 403})
AUTH_ERROR_CODES = frozenset({"invalid_api_key", "API_KEY_INVALID"})


class GenerationRequest(BaseModel):
    """A single bio generation request."""

    subject_name: str = Field(..., min_length=1, description="Person the bio is about")
    role_label: str = Field(..., min_length=1, description="Role or profession of the person")

    model_config = ConfigDict(frozen=True)


class ProviderError(Exception):
    """Base exception for provider-related errors."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict] = None,
        error_code: Optional[str] = None,
        retryable: bool = True,
    ):
        """
        Initialize provider error.

        Args:
            message: Error message
            provider: Provider name
            status_code: HTTP status code if applicable
            details: Additional error details
            error_code: Error code for categorization
            retryable: Whether the error is retryable
        """
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        self.retryable = retryable


class ProviderNotConfiguredError(ProviderError):
    """A specific provider was requested but has no usable credentials."""

    def __init__(self, provider: str):
        super().__init__(
            f"{provider} provider is not configured",
            provider=provider,
            error_code="provider_not_configured",
            retryable=False,
        )


class ProviderCallError(ProviderError):
    """A provider call failed. Carries the SDK error's status, code and type."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        error_type: Optional[str] = None,
        retryable: bool = True,
        original: Optional[BaseException] = None,
    ):
        super().__init__(
            message,
            provider=provider,
            status_code=status_code,
            error_code=error_code,
            retryable=retryable,
        )
        self.error_type = error_type
        self.original = original

    def to_log_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "message": self.message,
            "status": self.status_code,
            "code": self.error_code,
            "type": self.error_type,
        }


class AuthenticationError(ProviderCallError):
    """Credentials rejected by the provider. Never retried."""

    def __init__(self, message: str, provider: str, **kwargs):
        kwargs["retryable"] = False
        super().__init__(message, provider, **kwargs)


class NoProviderConfiguredError(ProviderError):
    """Neither bio provider has usable credentials."""

    def __init__(
        self,
        message: str = (
            "No AI service is configured. Please set either OPENAI_API_KEY "
            "or GEMINI_API_KEY environment variable."
        ),
    ):
        super().__init__(message, error_code="no_provider_configured", retryable=False)


class BioGenerationError(ProviderError):
    """Both the primary (after retries) and the fallback provider failed."""

    def __init__(self, primary_error: BaseException, fallback_error: BaseException):
        super().__init__(
            f"Bio generation failed: OpenAI ({primary_error}) and "
            f"Gemini ({fallback_error}) both failed",
            error_code="bio_generation_failed",
            retryable=False,
            details={
                "primary_error": str(primary_error),
                "fallback_error": str(fallback_error),
            },
        )
        self.primary_error = primary_error
        self.fallback_error = fallback_error


def is_auth_failure(status_code: Optional[int], error_code: Optional[str]) -> bool:
    """Return True if the status/code pair means the credentials were rejected."""
    return status_code in AUTH_STATUS_CODES or error_code in AUTH_ERROR_CODES


class BioProvider(ABC):
    """Abstract base class for bio text-generation providers."""

    name: str = "provider"

    def __init__(self, api_key: str, model: str, timeout: int = 30):
        """
        Initialize the provider.

        Args:
            api_key: API key for the provider
            model: Model identifier
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @abstractmethod
    def build_prompt(self, request: GenerationRequest) -> str:
        """Build the provider-specific prompt for a request."""

    @abstractmethod
    async def send(self, prompt: str) -> str:
        """
        Send one prompt and return the raw text response.

        Raises:
            ProviderCallError: If the provider call fails
        """

    async def generate(self, request: GenerationRequest) -> str:
        """Generate a bio for the request with a single provider call."""
        text = await self.send(self.build_prompt(request))
        bio = (text or "").strip()
        if not bio:
            raise ProviderCallError(
                f"{self.name} returned an empty response",
                provider=self.name,
                error_code="empty_response",
            )
        return bio

    def classify(self, error: BaseException) -> bool:
        """Return True if the error is worth retrying."""
        if isinstance(error, ProviderError):
            if not error.retryable:
                return False
            return not is_auth_failure(error.status_code, error.error_code)
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
