"""Retries with exponential backoff for catalog HTTP calls.

Only transport errors and transient statuses (429, 5xx) are retried. When
the retries run out, the last transport error is re-raised and the last
response is returned as-is, so the caller reports the real failure.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from shelfwise.constants import (
    CATALOG_MAX_RETRIES,
    CATALOG_RETRY_BASE_DELAY,
    CATALOG_RETRY_MAX_DELAY,
)
from shelfwise.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = CATALOG_MAX_RETRIES
    base_delay: float = CATALOG_RETRY_BASE_DELAY  # seconds
    max_delay: float = CATALOG_RETRY_MAX_DELAY  # seconds
    retryable_status_codes: frozenset[int] = frozenset({429, 500, 502, 503, 504})

    def backoff(self, attempt: int, response: httpx.Response | None = None) -> float:
        """Delay before the next attempt; a numeric Retry-After wins over the backoff."""
        retry_after = response.headers.get("Retry-After") if response is not None else None
        if retry_after is not None:
            try:
                return min(max(float(retry_after), 0.0), self.max_delay)
            except ValueError:
                pass  # HTTP-date form, fall back to backoff
        return min(self.base_delay * (2**attempt), self.max_delay)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    request: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    operation_name: str = "request",
) -> httpx.Response:
    """Send ``request`` until it gives a non-transient response.

    Args:
        request: Zero-argument coroutine function sending one HTTP request
        config: Retry configuration
        operation_name: Name of the operation for logging

    Returns:
        The first non-retryable response, or the last response once retries run out

    Raises:
        httpx.TransportError: the last attempt failed at the transport level
    """
    attempts = config.max_retries + 1
    for attempt in range(attempts):
        is_last = attempt == config.max_retries
        try:
            response = await request()
        except httpx.TransportError as e:
            if is_last:
                logger.error(f"{operation_name}: failed after {attempts} attempts: {e!r}")
                raise
            delay = config.backoff(attempt)
            logger.warning(
                f"{operation_name}: {type(e).__name__}, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{attempts})"
            )
        else:
            if response.status_code not in config.retryable_status_codes:
                return response
            if is_last:
                logger.error(
                    f"{operation_name}: still HTTP {response.status_code} after {attempts} attempts"
                )
                return response
            delay = config.backoff(attempt, response)
            logger.warning(
                f"{operation_name}: HTTP {response.status_code}, retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{attempts})"
            )
        await asyncio.sleep(delay)

    raise AssertionError("unreachable")  # the last attempt always returns or raises
