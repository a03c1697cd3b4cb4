"""Base provider class for LLM analysis backends."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from langsmith import traceable

from ..config import AnalysisConfig, RetryPolicy
from ..errors import (
    ConfigurationGap,
    MalformedResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
)
from ..retry import parse_retry_after, with_backoff
from ..types import LLMProvider

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE_STATUSES = (502, 503)


@dataclass
class ProviderRequest:
    """A provider-specific HTTP request."""

    url: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


class BaseProvider(ABC):
    """Abstract base for LLM providers.

    Subclasses describe the request body and where the text payload sits
    in the response envelope; HTTP, error classification and backoff
    live here.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.analysis_timeout,
                transport=self._transport,
            )
        return self._client

    @property
    @abstractmethod
    def source(self) -> LLMProvider:
        """Provider identifier."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether an API key is configured."""
        pass

    @property
    @abstractmethod
    def retry_policy(self) -> RetryPolicy:
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        pass

    @abstractmethod
    def build_request(self, prompt: str) -> ProviderRequest:
        """Build the HTTP request for an analysis prompt."""
        pass

    @abstractmethod
    def extract_text(self, data: dict[str, Any]) -> Optional[str]:
        """Pull the generated text out of the response envelope."""
        pass

    def log_usage(self, data: dict[str, Any]) -> None:
        """Log token usage, if the provider reports it."""
        pass

    async def _send(self, prompt: str) -> str:
        """One request/response round trip, with failures classified."""
        name = self.source.value
        client = await self._get_client()
        request = self.build_request(prompt)

        try:
            response = await client.post(
                request.url,
                json=request.body,
                headers=request.headers,
                params=request.params,
            )
        except httpx.TransportError as e:
            raise NetworkError(f"{name} request failed: {e!r}", provider=name) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"{name} request error: {e!r}", provider=name) from e

        status = response.status_code
        logger.debug(f"{name} response status: {status}")

        if status == 429:
            raise RateLimitError(
                f"{name} API rate limit hit",
                provider=name,
                retry_after=parse_retry_after(response.headers.get("retry-after")),
            )
        if status in SERVICE_UNAVAILABLE_STATUSES:
            raise ServiceUnavailableError(
                f"{name} service unavailable ({status})", provider=name, status_code=status
            )
        if response.is_error:
            logger.error(f"{name} API error response: {response.text[:500]}")
            raise ProviderError(
                f"{name} API error: {status} {response.reason_phrase}",
                provider=name,
                status_code=status,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{name} returned a non-JSON envelope", provider=name) from e

        text = self.extract_text(data) if isinstance(data, dict) else None
        if not text:
            raise MalformedResponseError(f"No response content from {name}", provider=name)

        self.log_usage(data)
        logger.debug(f"{name} raw response ({len(text)} chars): {text[:300]}")
        return text

    @traceable(run_type="llm", name="provider_complete")
    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the raw text payload.

        Raises:
            ConfigurationGap: If no API key is configured
            ProviderError: On non-retryable statuses or exhausted retries
            MalformedResponseError: If the response carries no text payload
        """
        if not self.is_available:
            raise ConfigurationGap(
                f"{self.source.value} API key not configured", provider=self.source.value
            )

        logger.info(
            f"Calling {self.source.value} ({self.model}), prompt {len(prompt)} chars, "
            f"max {self.retry_policy.max_attempts} attempts"
        )
        return await with_backoff(
            lambda: self._send(prompt), self.retry_policy, self.source.value
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
