"""Retry logic with exponential backoff and jitter

Implements retry logic for the chat model that:
1. Only retries transient errors (timeouts, rate limits, 5xx errors)
2. Uses exponential backoff with jitter
3. Gives up after max retries
"""

import asyncio
import random
import logging
from typing import Awaitable, Callable, Any, TypeVar
import httpx

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Retry configuration
MAX_RETRIES = 2
BASE_DELAY = 0.5  # seconds
MAX_DELAY = 8.0  # seconds
JITTER = 0.1  # 10% random jitter

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def is_retryable_error(exc: Exception) -> bool:
    """
    Determine if error is transient and should be retried.

    Retryable: network timeouts and transport errors, HTTP 429 and 5xx.
    Not retryable: HTTP 4xx client errors (bad key, malformed request).
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES

    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return True

    return False


def calculate_backoff(attempt: int) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Formula: delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY) +/- 10%

    Example:
        Attempt 0: ~0.5s
        Attempt 1: ~1s
        Attempt 2: ~2s
    """
    delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)
    jitter_amount = random.uniform(-JITTER * delay, JITTER * delay)
    return max(delay + jitter_amount, 0.0)


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_retries: int = MAX_RETRIES,
    **kwargs: Any
) -> T:
    """
    Retry async function with exponential backoff.

    Args:
        func: Async function to retry
        max_retries: Maximum number of retry attempts
        *args, **kwargs: Arguments to pass to func

    Returns:
        Result from func

    Raises:
        Last exception if all retries exhausted or non-retryable error
    """
    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)

        except Exception as e:
            if attempt == max_retries:
                logger.error(f"[RETRY] All {max_retries} retries exhausted for {func.__name__}")
                raise

            if not is_retryable_error(e):
                logger.warning(
                    f"[RETRY] Non-retryable error for {func.__name__}: "
                    f"{type(e).__name__}: {e}"
                )
                raise

            backoff = calculate_backoff(attempt)
            logger.info(
                f"[RETRY] Attempt {attempt + 1}/{max_retries} for {func.__name__} "
                f"after {backoff:.2f}s (error: {type(e).__name__})"
            )
            await asyncio.sleep(backoff)

    raise RuntimeError("Retry logic failed unexpectedly")
