"""
Retry utilities for handling rate limits and transient HTTP errors.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

# HTTP status codes that represent transient errors worth retrying.
# Everything else (400, 401, 403, 404, ...) is permanent.
_TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({
    429,  # Too many requests
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})


def is_transient_http_error(exception: Exception) -> bool:
    """Check if an httpx error is transient and worth retrying.

    Timeouts and connection failures are always transient. Status errors
    are transient only for rate limiting and gateway/unavailable responses.
    """
    if isinstance(exception, (httpx.TimeoutException, httpx.ConnectError, httpx.RemoteProtocolError)):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in _TRANSIENT_STATUS_CODES
    return False


def _retry_after_seconds(exception: Exception) -> float | None:
    """Honour a Retry-After header on rate-limited responses."""
    if not isinstance(exception, httpx.HTTPStatusError):
        return None
    header = exception.response.headers.get("Retry-After", "")
    match = re.fullmatch(r"\s{0,10}(\d+)\s{0,10}", header)
    return float(match.group(1)) if match else None


async def run_with_retry(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
) -> T:
    """
    Execute an async function with retry logic for transient HTTP errors.

    Args:
        func: Async function to execute (no parameters)
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds before first retry
        backoff_factor: Multiplier for delay between retries

    Returns:
        Result from the function

    Raises:
        Exception: If max retries exceeded or non-retryable error occurs
    """
    attempts = max(1, max_retries)

    for attempt in range(attempts):
        try:
            return await func()
        except Exception as e:
            if not is_transient_http_error(e) or attempt >= attempts - 1:
                raise

            wait_time = _retry_after_seconds(e)
            if wait_time is None:
                wait_time = initial_delay * (backoff_factor**attempt)

            logger.warning(
                "Transient HTTP error detected (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                e,
                attempt + 1,
                attempts,
                wait_time,
            )
            await asyncio.sleep(wait_time)

    raise RuntimeError("Max retries exceeded")
