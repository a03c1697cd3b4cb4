"""Google Gemini generateContent provider.

API: https://ai.google.dev/api/generate-content
"""

import logging
from typing import Any, Optional

from ..config import RetryPolicy
from ..prompts import ANALYSIS_SYSTEM
from ..types import LLMProvider
from .base import BaseProvider, ProviderRequest

logger = logging.getLogger(__name__)


class GeminiProvider(BaseProvider):
    """Gemini provider. The API key travels as a query parameter."""

    @property
    def source(self) -> LLMProvider:
        return LLMProvider.GEMINI

    @property
    def is_available(self) -> bool:
        return self._config.gemini_available

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._config.gemini_retry

    @property
    def model(self) -> str:
        return self._config.gemini_model

    def build_request(self, prompt: str) -> ProviderRequest:
        base_url = self._config.gemini_base_url.rstrip("/")
        return ProviderRequest(
            url=f"{base_url}/models/{self.model}:generateContent",
            body={
                "contents": [{"parts": [{"text": f"{ANALYSIS_SYSTEM}\n\n{prompt}"}]}],
                "generationConfig": {
                    "temperature": self._config.temperature,
                    "maxOutputTokens": self._config.max_output_tokens,
                },
            },
            params={"key": self._config.gemini_api_key or ""},
        )

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        candidates = data.get("candidates") or []
        logger.debug(f"Gemini candidates: {len(candidates)}")
        if not candidates or not isinstance(candidates[0], dict):
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts or not isinstance(parts[0], dict):
            return None
        text = parts[0].get("text")
        return text if isinstance(text, str) else None

    def log_usage(self, data: dict[str, Any]) -> None:
        usage = data.get("usageMetadata") or {}
        if usage:
            logger.info(
                f"Gemini usage - prompt: {usage.get('promptTokenCount', 'N/A')}, "
                f"candidates: {usage.get('candidatesTokenCount', 'N/A')}, "
                f"total: {usage.get('totalTokenCount', 'N/A')} tokens"
            )
