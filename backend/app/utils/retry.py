"""Bounded retry helper for upstream calls.

Unlike exponential backoff, the chat path waits one fixed interval between
attempts so that worst-case request latency stays predictable.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from app.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


async def retry_with_backoff(
    call: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    is_retryable: Callable[[Exception], bool],
    delay: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "upstream",
    log_to: Optional[logging.Logger] = None,
) -> T:
    """Await ``call()`` until it succeeds or the attempt budget is spent.

    Args:
        call: Zero-argument coroutine factory; invoked once per attempt.
        max_attempts: Total attempts including the first one.
        is_retryable: Predicate deciding whether a failure earns another attempt.
        delay: Seconds to wait before each retry.
        sleep: Awaitable sleep, replaceable in tests.
        label: Name used in log lines.
        log_to: Optional logger (defaults to the module logger).

    Raises:
        The last exception from ``call`` when it is not retryable or the
        budget is exhausted.
    """
    log = log_to or logger
    attempt = 0
    while True:
        attempt += 1
        try:
            return await call()
        except Exception as exc:
            if attempt >= max_attempts or not is_retryable(exc):
                raise
            log.warning(
                "Retrying %s call after %.2fs (attempt %s/%s): %s",
                label,
                delay,
                attempt,
                max_attempts,
                exc,
            )
            if delay > 0:
                await sleep(delay)
