"""
Pramanta - Bounded Retry with Exponential Backoff
==================================================
Generic async retry helper.  The caller decides *which* failures are
worth retrying through a predicate; everything else propagates on the
first attempt.

Usage:
    from pramanta.src.utils.retry import retry_async
    result = await retry_async(lambda: client.call(x), should_retry=is_transient, max_attempts=3)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pramanta.src.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


async def retry_async(operation: Callable[[], Awaitable[T]], *, should_retry: Callable[[BaseException], bool], max_attempts: int = 3, initial_delay: float = 1.0, backoff_factor: float = 2.0, sleep: Sleeper = asyncio.sleep, label: str = "operation") -> T:
    """
    Await ``operation()`` until it succeeds or the retry budget is spent.

    Parameters
    ----------
    operation
        Zero-argument coroutine factory; called once per attempt.
    should_retry
        Predicate over the raised exception.  ``False`` → re-raise now.
    max_attempts
        Total attempts including the first (``3`` → at most 2 retries).
    initial_delay, backoff_factor
        Delay before retry *n* is ``initial_delay * backoff_factor**(n-1)``.
    sleep
        Injected for tests; defaults to ``asyncio.sleep``.

    Raises
    ------
    Exception
        The last exception raised by ``operation``, unchanged.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be ≥ 1, got {max_attempts}")

    delay = initial_delay
    attempt = 0

    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:
            if not should_retry(exc):
                raise

            if attempt >= max_attempts:
                logger.error("[RETRY] %s still failing after %d attempt(s) — giving up.", label, attempt)
                raise

            logger.warning("[RETRY] %s failed transiently (attempt %d/%d): %s — retrying in %.1fs", label, attempt, max_attempts, exc, delay)
            await sleep(delay)
            delay *= backoff_factor
