"""
Retry utility with exponential backoff
Used by both transports. Every attempt calls the wrapped function again, so
requests are re-signed with a fresh timestamp on each retry.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, TypeVar

T = TypeVar('T')

DEFAULT_RETRYABLE_ERRORS = ['NETWORK_ERROR', 'RATE_LIMITED', 'RETRY_LATER', 'INTERNAL']


class RetryPolicy:
    """Configuration for retry behavior"""

    def __init__(
        self,
        max_retries: int = 3,
        backoff_ms: Optional[List[int]] = None,
        retryable_errors: Optional[List[str]] = None,
        timeout: int = 60000
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self.max_retries = max_retries
        self.backoff_ms = backoff_ms or [1000, 2000, 4000]
        self.retryable_errors = retryable_errors or list(DEFAULT_RETRYABLE_ERRORS)
        self.timeout = timeout

    def delay_for(self, attempt: int) -> float:
        """Delay in seconds before retry number attempt + 1"""
        if attempt < len(self.backoff_ms):
            return self.backoff_ms[attempt] / 1000
        return self.backoff_ms[-1] / 1000


def is_retryable_error(error: Exception, retryable_errors: List[str]) -> bool:
    """Check if error is retryable"""
    return getattr(error, 'code', None) in retryable_errors


def with_retry(
    fn: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    debug: bool = False
) -> T:
    """
    Execute function with automatic retry logic

    Args:
        fn: Function to execute
        policy: Retry policy configuration
        debug: Print retry attempts

    Returns:
        Result from successful function execution

    Raises:
        Last exception if all retries exhausted, or the first
        non-retryable exception
    """
    if policy is None:
        policy = RetryPolicy()

    start_time = time.time() * 1000  # Convert to milliseconds
    last_error: Optional[Exception] = None

    for attempt in range(policy.max_retries + 1):
        if (time.time() * 1000 - start_time) > policy.timeout:
            raise TimeoutError(
                f"Operation timed out after {policy.timeout}ms ({attempt} attempts)"
            ) from last_error

        try:
            return fn()
        except Exception as error:
            last_error = error

            if attempt == policy.max_retries:
                break

            if not is_retryable_error(error, policy.retryable_errors):
                raise

            delay = policy.delay_for(attempt)
            if debug:
                print(f"Retry attempt {attempt + 1}/{policy.max_retries} after {delay * 1000:.0f}ms delay")

            time.sleep(delay)

    if last_error:
        raise last_error
    raise RuntimeError("Unexpected error in retry logic")


async def with_retry_async(
    fn: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    debug: bool = False
) -> T:
    """Async variant of with_retry()"""
    if policy is None:
        policy = RetryPolicy()

    loop = asyncio.get_running_loop()
    start_time = loop.time() * 1000
    last_error: Optional[Exception] = None

    for attempt in range(policy.max_retries + 1):
        if (loop.time() * 1000 - start_time) > policy.timeout:
            raise TimeoutError(
                f"Operation timed out after {policy.timeout}ms ({attempt} attempts)"
            ) from last_error

        try:
            return await fn()
        except Exception as error:
            last_error = error

            if attempt == policy.max_retries:
                break

            if not is_retryable_error(error, policy.retryable_errors):
                raise

            delay = policy.delay_for(attempt)
            if debug:
                print(f"Retry attempt {attempt + 1}/{policy.max_retries} after {delay * 1000:.0f}ms delay")

            await asyncio.sleep(delay)

    if last_error:
        raise last_error
    raise RuntimeError("Unexpected error in retry logic")
