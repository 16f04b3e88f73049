"""
Retry helpers for calls to the sports-data vendors.

Exponential backoff with jitter. An exception may carry a `retry_after`
attribute (seconds, from the HTTP `Retry-After` header) which overrides the
computed delay.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: tuple = (ConnectionError, TimeoutError)


def calculate_delay(attempt: int, config: RetryConfig, error: Optional[BaseException] = None) -> float:
    """Delay before the next attempt (attempt is zero-based)."""
    retry_after = getattr(error, "retry_after", None)
    if retry_after is not None:
        return min(float(retry_after), config.max_delay)

    delay = min(
        config.base_delay * (config.exponential_base ** attempt),
        config.max_delay,
    )
    if config.jitter:
        delay = delay * (1 + random.uniform(0, 0.25))
    return delay


def retry_sync(
    func: Callable[..., T],
    *args,
    config: Optional[RetryConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
) -> T:
    """
    Call `func` until it succeeds or `config.max_attempts` is exhausted.

    Only `config.retryable_exceptions` are retried; anything else propagates
    immediately. The last retryable exception is re-raised when every attempt
    fails.
    """
    config = config or RetryConfig()
    last_exception: Optional[BaseException] = None

    for attempt in range(config.max_attempts):
        try:
            return func(*args, **kwargs)
        except config.retryable_exceptions as e:
            last_exception = e
            if attempt < config.max_attempts - 1:
                delay = calculate_delay(attempt, config, e)
                logger.warning(
                    f"Attempt {attempt + 1}/{config.max_attempts} failed: {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                sleep(delay)
            else:
                logger.error(f"All {config.max_attempts} attempts failed. Last error: {e}")

    raise last_exception
