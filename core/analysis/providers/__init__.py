"""LLM provider registry."""

from ..types import LLMProvider
from .base import BaseProvider, ProviderRequest
from .gemini import GeminiProvider
from .openai import OpenAIProvider

PROVIDER_REGISTRY: dict[LLMProvider, type[BaseProvider]] = {
    LLMProvider.OPENAI: OpenAIProvider,
    LLMProvider.GEMINI: GeminiProvider,
}

__all__ = [
    "BaseProvider",
    "ProviderRequest",
    "OpenAIProvider",
    "GeminiProvider",
    "PROVIDER_REGISTRY",
]
