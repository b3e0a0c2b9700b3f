"""
Google Gemini provider: fallback bio generator.
"""

from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from .base import (
    AuthenticationError,
    BioProvider,
    GenerationRequest,
    ProviderCallError,
    is_auth_failure,
)

# google.generativeai holds a single API key per process.
_configured_api_key: Optional[str] = None


def configure_api_key(api_key: str) -> None:
    """Configure the process-wide Gemini key; a second, different key is rejected."""
    global _configured_api_key
    if _configured_api_key is not None and _configured_api_key != api_key:
        raise ValueError("google.generativeai is already configured with a different API key")
    genai.configure(api_key=api_key)
    _configured_api_key = api_key


class GeminiProvider(BioProvider):
    """Gemini generate_content provider.

    Without an injected client, all instances share the process-wide key.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: int = 30,
        client: Optional[Any] = None,
    ) -> None:
        super().__init__(api_key, model, timeout)
        if client is None:
            configure_api_key(api_key)
            client = genai.GenerativeModel(model)
        self.client = client

    def build_prompt(self, request: GenerationRequest) -> str:
        return (
            f"Generate a professional bio for {request.subject_name} who is a "
            f"{request.role_label}.\n\n"
            "Requirements:\n"
            "- Write in third person\n"
            "- Length: 100-200 words\n"
            "- Professional tone\n"
            "- Include expertise, experience, and key qualities\n"
            "- Focus on professional achievements and skills\n"
            "- Make it engaging and well-structured\n\n"
            "Do not include any formatting, just return the bio text."
        )

    async def send(self, prompt: str) -> str:
        try:
            response = await self.client.generate_content_async(
                prompt, request_options={"timeout": self.timeout}
            )
        except google_exceptions.GoogleAPICallError as e:
            raise self._wrap_error(e) from e
        except Exception as e:
            raise ProviderCallError(
                f"Unexpected error: {e}",
                provider=self.name,
                error_type=type(e).__name__,
                original=e,
            ) from e

        try:
            return response.text
        except ValueError as e:
            # Raised when the candidate was blocked or has no text parts
            raise ProviderCallError(
                f"Gemini response had no text: {e}",
                provider=self.name,
                error_code="malformed_response",
                error_type=type(e).__name__,
                original=e,
            ) from e

    def _wrap_error(self, error: google_exceptions.GoogleAPICallError) -> ProviderCallError:
        status_code = error.code if isinstance(error.code, int) else None
        error_code = error.reason
        error_cls = AuthenticationError if is_auth_failure(status_code, error_code) else ProviderCallError
        return error_cls(
            error.message or str(error),
            provider=self.name,
            status_code=status_code,
            error_code=error_code,
            error_type=type(error).__name__,
            original=error,
        )
