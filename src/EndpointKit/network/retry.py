"""Fixed-delay retry policy built on Tenacity.

Endpoint calls are retried with a *fixed* delay and a bounded attempt count:

- **Every failure is retried**: no distinction between retryable and fatal
  ``Exception`` subclasses; each attempt re-runs the operation from scratch.
- **Fixed delay**: the same wait before every retry, never before the first
  attempt, never after the last one.
- **Original error**: on exhaustion the last attempt's exception is re-raised
  unmodified (never a ``RetryError`` wrapper).
- **Cancellation**: ``asyncio.CancelledError`` is a ``BaseException`` and is
  propagated immediately without further attempts.

Example:
    >>> from EndpointKit.network.retry import create_fixed_delay_retry_policy
    >>> policy = create_fixed_delay_retry_policy(attempts=3, delay_seconds=1.0)
    >>> async def fetch():
    ...     async for attempt in policy:
    ...         with attempt:
    ...             result = await transport.execute(request)
    ...     return result
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

SleepFunction = Callable[[float], Awaitable[None]]


def create_fixed_delay_retry_policy(
    attempts: int,
    delay_seconds: float,
    *,
    sleep: Optional[SleepFunction] = None,
) -> AsyncRetrying:
    """Create an async Tenacity policy with fixed delay and bounded attempts.

    Args:
        attempts: Total number of attempts, including the first (>= 1).
        delay_seconds: Delay before each retry (>= 0).
        sleep: Coroutine function used to wait; defaults to ``asyncio.sleep``.

    Returns:
        Configured ``AsyncRetrying`` for ``async for attempt in policy`` loops.

    Raises:
        ValueError: If ``attempts`` < 1 or ``delay_seconds`` < 0.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")
    if delay_seconds < 0:
        raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")

    return AsyncRetrying(
        sleep=sleep or asyncio.sleep,
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(delay_seconds),
        retry=retry_if_exception_type(Exception),
        # Log once per actual retry sleep
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


__all__ = ["SleepFunction", "create_fixed_delay_retry_policy"]
