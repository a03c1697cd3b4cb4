"""OpenAI chat completions provider.

API: https://platform.openai.com/docs/api-reference/chat
"""

import logging
from typing import Any, Optional

from ..config import RetryPolicy
from ..prompts import ANALYSIS_SYSTEM
from ..types import LLMProvider
from .base import BaseProvider, ProviderRequest

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider."""

    @property
    def source(self) -> LLMProvider:
        return LLMProvider.OPENAI

    @property
    def is_available(self) -> bool:
        return self._config.openai_available

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._config.openai_retry

    @property
    def model(self) -> str:
        return self._config.openai_model

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self._config.openai_base_url.rstrip('/')}/chat/completions",
            body={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": ANALYSIS_SYSTEM},
                    {"role": "user", "content": prompt},
                ],
                "temperature": self._config.temperature,
                "max_tokens": self._config.max_output_tokens,
            },
            headers={"Authorization": f"Bearer {self._config.openai_api_key}"},
        )

    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None
        message = choices[0].get("message") or {}
        content = message.get("content")
        return content if isinstance(content, str) else None

    def log_usage(self, data: dict[str, Any]) -> None:
        usage = data.get("usage") or {}
        logger.info(
            f"OpenAI usage - prompt: {usage.get('prompt_tokens', 'N/A')}, "
            f"completion: {usage.get('completion_tokens', 'N/A')}, "
            f"total: {usage.get('total_tokens', 'N/A')} tokens"
        )
