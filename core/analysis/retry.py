"""Exponential backoff for provider calls.

Only ``TransientProviderError`` subclasses are retried. Anything else a
call raises (bad status, malformed payload) propagates on the first
attempt. When the attempt budget runs out the last transient error is
wrapped in a terminal ``ProviderError``.
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable, Optional, TypeVar

from .config import RetryPolicy
from .errors import (
    NetworkError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
    TransientProviderError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a Retry-After header given in seconds or as an HTTP date."""
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def backoff_delay(
    policy: RetryPolicy, error: TransientProviderError, attempt: int
) -> float:
    """Delay before the next attempt, without jitter."""
    factor = 2**attempt
    if isinstance(error, RateLimitError):
        base = max(error.retry_after or 0.0, policy.rate_limit_base)
        return min(policy.rate_limit_cap, base * factor)
    if isinstance(error, ServiceUnavailableError):
        return min(policy.service_cap, policy.service_base * factor)
    return min(policy.network_cap, policy.network_base * factor)


def jitter_for(policy: RetryPolicy, error: TransientProviderError) -> float:
    if isinstance(error, RateLimitError):
        return random.uniform(0, policy.rate_limit_jitter)
    if isinstance(error, ServiceUnavailableError):
        return random.uniform(0, policy.service_jitter)
    return random.uniform(0, policy.network_jitter)


def _describe(error: TransientProviderError) -> str:
    if isinstance(error, RateLimitError):
        return "rate limit"
    if isinstance(error, ServiceUnavailableError):
        return "service unavailable"
    if isinstance(error, NetworkError):
        return "network error"
    return "transient error"


async def with_backoff(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    provider: str,
) -> T:
    """Execute async function, retrying transient provider errors with backoff.

    Rate-limit delays never shrink between consecutive rate-limited
    attempts, even if a later Retry-After header asks for less.

    Raises:
        ProviderError: When every attempt failed with a transient error
    """
    last_error: Optional[TransientProviderError] = None
    previous_rate_delay = 0.0

    for attempt in range(policy.max_attempts):
        try:
            return await fn()
        except TransientProviderError as e:
            last_error = e
            if attempt >= policy.max_attempts - 1:
                break

            delay = backoff_delay(policy, e, attempt)
            if isinstance(e, RateLimitError):
                delay = max(delay, previous_rate_delay)
                previous_rate_delay = delay
            total = delay + jitter_for(policy, e)

            logger.warning(
                f"{provider} {_describe(e)} (attempt {attempt + 1}/{policy.max_attempts}), "
                f"retrying in {total:.1f}s: {e}"
            )
            await asyncio.sleep(total)

    raise ProviderError(
        f"{provider} failed after {policy.max_attempts} attempts: {last_error}",
        provider=provider,
    ) from last_error
