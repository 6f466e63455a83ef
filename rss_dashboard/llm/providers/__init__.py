"""LLM provider implementations for the command channel."""

from .base import CommandProvider, ProviderError
from .factory import available_providers, create_provider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

__all__ = [
    "CommandProvider",
    "ProviderError",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "create_provider",
    "available_providers",
]
