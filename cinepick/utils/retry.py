"""Retry with exponential backoff for TMDB requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from cinepick.constants import RETRY_BASE_DELAY, RETRY_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = RETRY_MAX_ATTEMPTS
    base_delay: float = RETRY_BASE_DELAY  # seconds
    max_delay: float = 8.0  # seconds
    exponential_base: float = 2.0
    retryable_exceptions: tuple[type[BaseException], ...] = (
        httpx.TimeoutException,
        httpx.ConnectError,
        httpx.ReadError,
        httpx.RemoteProtocolError,
    )
    retryable_status_codes: tuple[int, ...] = (429, 500, 502, 503, 504)

    def delay_for(self, attempt: int, response: httpx.Response | None = None) -> float:
        """Backoff delay before retrying after the given (0-based) attempt.

        A numeric ``Retry-After`` header (TMDB sends one with 429) takes
        precedence, still capped at ``max_delay``.
        """
        retry_after = response.headers.get("Retry-After") if response is not None else None
        if retry_after and retry_after.isdigit():
            return min(float(retry_after), self.max_delay)
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


DEFAULT_RETRY_CONFIG = RetryConfig()


async def retry_async(
    func: Callable[..., Awaitable[httpx.Response]],
    *args: Any,
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    operation_name: str = "request",
    **kwargs: Any,
) -> httpx.Response | None:
    """Send an HTTP request with retry logic and exponential backoff.

    Transport errors in ``config.retryable_exceptions`` and responses with a
    status in ``config.retryable_status_codes`` are retried. Any other
    response, successful or not, is returned as is.

    Args:
        func: Async callable returning an ``httpx.Response``
        *args: Positional arguments for the callable
        config: Retry configuration
        operation_name: Name of the operation for logging
        **kwargs: Keyword arguments for the callable

    Returns:
        The response, or None if every attempt failed
    """
    attempts = config.max_retries + 1

    for attempt in range(attempts):
        try:
            response = await func(*args, **kwargs)
        except config.retryable_exceptions as e:
            if attempt < config.max_retries:
                delay = config.delay_for(attempt)
                logger.warning(
                    f"{operation_name}: {type(e).__name__}, "
                    f"retrying in {delay:.1f}s (attempt {attempt + 1}/{attempts})"
                )
                await asyncio.sleep(delay)
                continue
            logger.error(f"{operation_name}: Failed after {attempts} attempts: {e!r}")
            return None

        if response.status_code not in config.retryable_status_codes:
            return response

        if attempt < config.max_retries:
            delay = config.delay_for(attempt, response)
            logger.warning(
                f"{operation_name}: Got status {response.status_code}, "
                f"retrying in {delay:.1f}s (attempt {attempt + 1}/{attempts})"
            )
            await asyncio.sleep(delay)
        else:
            logger.error(
                f"{operation_name}: Failed after {attempts} attempts "
                f"with status {response.status_code}"
            )

    return None
