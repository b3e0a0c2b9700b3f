"""
OpenAI provider: primary bio generator backed by chat completions.
"""

import time
from typing import Any, Dict, List, Optional

from openai import APIError, AsyncOpenAI

from user_bio_service.telemetry import get_logger

from .base import (
    AuthenticationError,
    BioProvider,
    GenerationRequest,
    ProviderCallError,
    is_auth_failure,
)

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a professional bio writer. Create detailed, engaging professional bios "
    "between 100-200 words that highlight expertise, experience, and passion without "
    "being overly promotional. Focus on professional qualities, skills, and work approach."
)


class OpenAIProvider(BioProvider):
    """OpenAI chat completions provider."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        timeout: int = 30,
        max_tokens: int = 250,
        temperature: float = 0.7,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        super().__init__(api_key, model, timeout)
        self.max_tokens = max_tokens
        self.temperature = temperature
        # Retries are owned by the orchestrator
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def build_prompt(self, request: GenerationRequest) -> str:
        return (
            f"Generate a comprehensive, professional bio (100-200 words) for a person named "
            f"{request.subject_name} who works as a {request.role_label}. The bio should be "
            "engaging, professional, and highlight their expertise, experience, and passion for "
            "their field. Include details about their skills, approach to work, and commitment "
            "to excellence. Do not include any personal information beyond what's provided."
        )

    def _messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    async def send(self, prompt: str) -> str:
        create_kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": self._messages(prompt),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "top_p": 1,
            "frequency_penalty": 0,
            "presence_penalty": 0,
        }

        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(**create_kwargs)
        except APIError as e:
            raise self._wrap_error(e) from e
        except Exception as e:
            raise ProviderCallError(
                f"Unexpected error: {e}",
                provider=self.name,
                error_type=type(e).__name__,
                original=e,
            ) from e

        if not response.choices or response.choices[0].message is None:
            raise ProviderCallError(
                "OpenAI response contained no choices",
                provider=self.name,
                error_code="malformed_response",
            )

        content = response.choices[0].message.content or ""
        logger.debug(
            "OpenAI completion received",
            model=self.model,
            duration=round(time.time() - start_time, 3),
            finish_reason=response.choices[0].finish_reason,
        )
        return content

    def _wrap_error(self, error: APIError) -> ProviderCallError:
        status_code = getattr(error, "status_code", None)
        error_code = error.code if isinstance(error.code, str) else None
        error_type = error.type or type(error).__name__
        message = error.message or str(error)

        error_cls = AuthenticationError if is_auth_failure(status_code, error_code) else ProviderCallError
        return error_cls(
            message,
            provider=self.name,
            status_code=status_code,
            error_code=error_code,
            error_type=error_type,
            original=error,
        )
