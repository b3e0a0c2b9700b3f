from .base import (
    AuthenticationError,
    BioGenerationError,
    BioProvider,
    GenerationRequest,
    NoProviderConfiguredError,
    ProviderCallError,
    ProviderError,
    ProviderNotConfiguredError,
)
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "BioProvider",
    "GenerationRequest",
    "ProviderError",
    "ProviderCallError",
    "AuthenticationError",
    "ProviderNotConfiguredError",
    "NoProviderConfiguredError",
    "BioGenerationError",
    "OpenAIProvider",
    "GeminiProvider",
]
