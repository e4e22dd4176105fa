"""Bounded retry with deterministic exponential backoff for RPC calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("429", "Too Many Requests")


@dataclass(frozen=True)
class RetryOptions:
    max_retries: int = 3  # total attempts, including the first
    initial_delay: float = 1.0  # seconds
    backoff_multiplier: float = 2.0
    rate_limit_delay: float = 30.0  # seconds, flat
    operation_name: str | None = None


def is_rate_limit_error(error: BaseException | None) -> bool:
    text = str(error) if error is not None else ""
    return any(marker in text for marker in RATE_LIMIT_MARKERS)


def compute_delay(options: RetryOptions, attempt: int, error: BaseException | None) -> float:
    """Delay before the retry following failed attempt number `attempt` (0-based)."""
    if is_rate_limit_error(error):
        return options.rate_limit_delay
    return options.initial_delay * options.backoff_multiplier ** attempt


def _wait(options: RetryOptions) -> Callable[[RetryCallState], float]:
    def wait(retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        return compute_delay(options, retry_state.attempt_number - 1, error)

    return wait


def _before_sleep(options: RetryOptions) -> Callable[[RetryCallState], None]:
    name = options.operation_name or "operation"

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if is_rate_limit_error(error):
            logger.warning("Rate limit detected for %s, using longer delay (%.1fs)", name, options.rate_limit_delay)
        logger.info(
            "Retry attempt %d/%d for %s after error: %s",
            retry_state.attempt_number, options.max_retries, name, error,
        )

    return log_retry


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run `operation`, retrying any exception up to `options.max_retries` attempts.

    The last error is re-raised unchanged once attempts are exhausted.
    """
    options = options or RetryOptions()
    retrying = AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(max(options.max_retries, 1)),
        wait=_wait(options),
        before_sleep=_before_sleep(options),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise AssertionError("unreachable")  # pragma: no cover
