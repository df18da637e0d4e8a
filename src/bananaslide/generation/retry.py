"""Retry/backoff policy shared by every provider adapter.

A single image request is retried only when the failure looks transient
(overload, unavailability, rate limiting, transport errors). Delay before
retry ``k`` (0-indexed) is ``base_delay * 2**k``: 2s, 4s, 8s with the
default base. Permanent failures stop immediately.

Usage:
    image = await with_retry(lambda: adapter._generate_once(...))
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_ATTEMPTS,
    TRANSIENT_MESSAGE_MARKERS,
    TRANSIENT_STATUS_CODES,
)
from ..errors import NetworkUnavailableError, UnauthenticatedError

_logger = logging.getLogger("ai_calls")

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


def is_transient(error: BaseException) -> bool:
    """Check whether an error is worth retrying."""
    if isinstance(error, UnauthenticatedError):
        return False
    if isinstance(error, NetworkUnavailableError):
        return True

    status = getattr(error, "status_code", None)
    if status in TRANSIENT_STATUS_CODES:
        return True

    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS)


def _log_before_sleep(label: str | None) -> Callable[[RetryCallState], None]:
    def _log(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        _logger.warning(
            f"{label or 'request'}: attempt {retry_state.attempt_number} failed "
            f"({error}); retrying in {delay:.1f}s"
        )
    return _log


async def with_retry(
    call: Callable[[], Awaitable[T]],
    max_attempts: int = RETRY_MAX_ATTEMPTS,
    *,
    base_delay: float = RETRY_BASE_DELAY_SECONDS,
    sleep: SleepFunc = asyncio.sleep,
    label: str | None = None,
) -> T:
    """Run ``call`` with bounded retries on transient failures.

    Args:
        call: Zero-argument coroutine factory; invoked once per attempt.
        max_attempts: Total attempts including the first one.
        base_delay: Delay before the first retry, doubled for each further one.
        sleep: Awaitable sleep used between attempts.
        label: Name used in log lines.

    Returns:
        The first successful result.

    Raises:
        The last error once attempts are exhausted, or the first permanent error.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, exp_base=2),
        retry=retry_if_exception(is_transient),
        before_sleep=_log_before_sleep(label),
        sleep=sleep,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await call()
    raise AssertionError("retry loop exited without a result")
