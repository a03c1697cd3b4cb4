"""Configuration for paper analysis."""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetryPolicy(BaseModel):
    """Backoff parameters for one provider.

    Delays are in seconds. For attempt ``n`` (0-based):

    - rate limited: ``min(rate_limit_cap, max(retry_after, rate_limit_base) * 2**n)``
    - service unavailable: ``min(service_cap, service_base * 2**n)``
    - network error: ``min(network_cap, network_base * 2**n)``

    A uniform jitter in ``[0, *_jitter]`` is added on top of each delay.
    """

    max_attempts: int = Field(default=7, ge=1)

    rate_limit_base: float = Field(default=2.0, ge=0.0)
    rate_limit_cap: float = Field(default=60.0, ge=0.0)
    rate_limit_jitter: float = Field(default=2.0, ge=0.0)

    service_base: float = Field(default=1.0, ge=0.0)
    service_cap: float = Field(default=30.0, ge=0.0)
    service_jitter: float = Field(default=1.0, ge=0.0)

    network_base: float = Field(default=1.0, ge=0.0)
    network_cap: float = Field(default=15.0, ge=0.0)
    network_jitter: float = Field(default=0.5, ge=0.0)


class AnalysisConfig(BaseSettings):
    """Settings for the analysis pipeline.

    Environment Variables:
        OPENAI_API_KEY: API key for OpenAI (primary provider)
        GEMINI_API_KEY: API key for Google Gemini
        OPENAI_MODEL: Chat completion model (default: gpt-4-turbo-preview)
        GEMINI_MODEL: Gemini model (default: gemini-1.5-flash-latest)
        ANALYSIS_TIMEOUT: HTTP timeout per request in seconds (default: 60)

    A missing key is not an error: the provider is skipped and the
    heuristic analyzer takes over when no provider is left.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: str | None = None
    gemini_api_key: str | None = None

    openai_model: str = "gpt-4-turbo-preview"
    gemini_model: str = "gemini-1.5-flash-latest"
    openai_base_url: str = "https://api.openai.com/v1"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    temperature: float = 0.3
    max_output_tokens: int = 4000
    max_content_chars: int = 8000
    analysis_timeout: float = 60.0

    openai_retry: RetryPolicy = Field(default_factory=lambda: RetryPolicy(max_attempts=7))
    gemini_retry: RetryPolicy = Field(default_factory=lambda: RetryPolicy(max_attempts=3))

    @property
    def openai_available(self) -> bool:
        """Check if the OpenAI provider is configured."""
        return bool(self.openai_api_key)

    @property
    def gemini_available(self) -> bool:
        """Check if the Gemini provider is configured."""
        return bool(self.gemini_api_key)


@lru_cache
def get_analysis_config() -> AnalysisConfig:
    """Get cached settings instance."""
    return AnalysisConfig()
