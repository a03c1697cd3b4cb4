"""Exception classes for paper analysis."""


class AnalysisError(Exception):
    """Base paper analysis exception."""

    def __init__(self, message: str, provider: str | None = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class ConfigurationGap(AnalysisError):
    """No API key configured for the provider."""

    pass


class TransientProviderError(AnalysisError):
    """Provider failure that is worth retrying with backoff."""

    pass


class RateLimitError(TransientProviderError):
    """Provider answered HTTP 429."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class ServiceUnavailableError(TransientProviderError):
    """Provider answered HTTP 502 or 503."""

    def __init__(self, message: str, provider: str | None = None, status_code: int = 503):
        super().__init__(message, provider=provider)
        self.status_code = status_code


class NetworkError(TransientProviderError):
    """Connection failure or timeout before a response arrived."""

    pass


class MalformedResponseError(AnalysisError):
    """Provider response had no payload or the payload was not a JSON object."""

    pass


class ProviderError(AnalysisError):
    """Terminal provider failure (non-retryable status or retries exhausted)."""

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None):
        super().__init__(message, provider=provider)
        self.status_code = status_code
