"""Bio generation with a retried primary provider and a single-shot fallback."""

import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from user_bio_service.config import Settings
from user_bio_service.providers import (
    BioGenerationError,
    BioProvider,
    GeminiProvider,
    GenerationRequest,
    NoProviderConfiguredError,
    OpenAIProvider,
    ProviderCallError,
    ProviderNotConfiguredError,
)
from user_bio_service.telemetry import get_logger
from user_bio_service.telemetry import metrics

from .retry_handler import RetryHandler

logger = get_logger(__name__)


class ServiceStatus(BaseModel):
    """Which bio providers are usable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    openai: bool = Field(..., description="Primary provider configured")
    gemini: bool = Field(..., description="Fallback provider configured")
    any_configured: bool = Field(..., description="At least one provider configured")
    fallback_available: bool = Field(..., description="Fallback provider can be used")


def _error_fields(error: BaseException) -> dict:
    if isinstance(error, ProviderCallError):
        return error.to_log_dict()
    return {"message": str(error), "type": type(error).__name__}


class BioOrchestrator:
    """Generates bios from the primary provider, falling back to the secondary.

    The orchestrator holds no per-call state; providers and retry policy are
    fixed at construction, so concurrent callers need no locking.
    """

    def __init__(
        self,
        primary: Optional[BioProvider] = None,
        fallback: Optional[BioProvider] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        self.primary = primary
        self.fallback = fallback
        self.retry_handler = retry_handler or RetryHandler()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BioOrchestrator":
        """Build providers for every configured credential."""
        primary = None
        if settings.has_openai_key:
            primary = OpenAIProvider(
                api_key=settings.openai_api_key.get_secret_value(),
                model=settings.openai_model,
                timeout=settings.request_timeout,
            )
        else:
            logger.warning("OpenAI API key not provided. OpenAI features will be disabled.")

        fallback = None
        if settings.has_gemini_key:
            fallback = GeminiProvider(
                api_key=settings.gemini_api_key.get_secret_value(),
                model=settings.gemini_model,
                timeout=settings.request_timeout,
            )
        else:
            logger.warning("Gemini API key not provided. Gemini features will be disabled.")

        return cls(
            primary=primary,
            fallback=fallback,
            retry_handler=RetryHandler(
                max_attempts=settings.bio_max_attempts,
                base_delay=settings.bio_base_delay,
            ),
        )

    @property
    def primary_configured(self) -> bool:
        return self.primary is not None

    @property
    def fallback_configured(self) -> bool:
        return self.fallback is not None

    def get_status(self) -> ServiceStatus:
        openai = self.primary_configured
        gemini = self.fallback_configured
        return ServiceStatus(
            openai=openai,
            gemini=gemini,
            any_configured=openai or gemini,
            fallback_available=gemini,
        )

    async def generate_bio(self, name: str, role: str) -> str:
        """
        Generate a professional bio.

        Args:
            name: Subject's name
            role: Subject's role or profession

        Returns:
            str: The generated bio

        Raises:
            ProviderCallError: Primary failed and no fallback is configured,
                or only the fallback is configured and it failed
            BioGenerationError: Primary and fallback both failed
            NoProviderConfiguredError: Neither provider is configured
        """
        request = GenerationRequest(subject_name=name, role_label=role)
        start_time = time.perf_counter()
        outcome = "failure"
        try:
            bio = await self._generate(request)
            outcome = "success"
            return bio
        finally:
            metrics.generation_duration.labels(outcome=outcome).observe(
                time.perf_counter() - start_time
            )

    async def _generate(self, request: GenerationRequest) -> str:
        if self.primary is not None:
            try:
                logger.info("Attempting bio generation with OpenAI")
                return await self._generate_with_retry(request)
            except Exception as primary_error:
                if self.fallback is None:
                    logger.error("OpenAI failed and Gemini not configured")
                    raise

                logger.warning(
                    "OpenAI bio generation failed after retries, attempting Gemini fallback",
                    error=str(primary_error),
                )
                metrics.fallbacks.inc()
                try:
                    logger.info("Falling back to Gemini for bio generation")
                    return await self._call(self.fallback, request)
                except Exception as fallback_error:
                    logger.error(
                        "Both OpenAI and Gemini failed",
                        openai_error=str(primary_error),
                        gemini_error=str(fallback_error),
                    )
                    raise BioGenerationError(primary_error, fallback_error) from fallback_error

        if self.fallback is not None:
            logger.info("OpenAI not configured, using Gemini for bio generation")
            return await self._call(self.fallback, request)

        logger.error("No AI service configured")
        raise NoProviderConfiguredError()

    async def _generate_with_retry(self, request: GenerationRequest) -> str:
        provider = self.primary
        max_attempts = self.retry_handler.max_attempts

        def on_attempt(attempt: int) -> None:
            logger.info(
                f"OpenAI bio generation attempt {attempt}/{max_attempts}",
                subject=request.subject_name,
                role=request.role_label,
            )

        def on_retry(error: BaseException, attempt: int, delay: float) -> None:
            logger.info(f"Retrying in {delay * 1000:.0f}ms...", attempt=attempt)

        def is_retryable(error: BaseException) -> bool:
            retryable = provider.classify(error)
            if not retryable:
                logger.error("Authentication error - not retrying", **_error_fields(error))
            return retryable

        try:
            return await self.retry_handler.execute(
                self._call,
                provider,
                request,
                is_retryable=is_retryable,
                on_attempt=on_attempt,
                on_retry=on_retry,
            )
        except Exception as e:
            if provider.classify(e):
                logger.error(f"All {max_attempts} OpenAI bio generation attempts failed")
            raise

    async def _call(self, provider: BioProvider, request: GenerationRequest) -> str:
        try:
            bio = await provider.generate(request)
        except Exception as e:
            metrics.provider_attempts.labels(provider=provider.name, outcome="failure").inc()
            logger.error(f"{provider.name} bio generation failed", **_error_fields(e))
            raise
        metrics.provider_attempts.labels(provider=provider.name, outcome="success").inc()
        logger.info(
            f"Generated bio using {provider.name}",
            subject=request.subject_name,
            role=request.role_label,
            bio_length=len(bio),
        )
        return bio

    async def request_direct(self, provider: str, name: str, role: str) -> str:
        """Send exactly one request to the named provider ("openai" or "gemini")."""
        providers = {"openai": self.primary, "gemini": self.fallback}
        if provider not in providers:
            raise ValueError(f"Unknown provider: {provider}")
        target = providers[provider]
        if target is None:
            raise ProviderNotConfiguredError(provider)
        return await self._call(target, GenerationRequest(subject_name=name, role_label=role))
