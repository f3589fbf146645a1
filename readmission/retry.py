"""Bounded retry with linear backoff for collaborator calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from readmission.config import RETRY_ATTEMPTS, RETRY_BASE_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait between tries."""
    max_attempts: int = RETRY_ATTEMPTS
    base_delay: float = RETRY_BASE_DELAY  # seconds; wait = base_delay * attempt
    retry_on: tuple[type[BaseException], ...] = (Exception,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def worst_case_wait(self) -> float:
        return self.base_delay * sum(range(1, self.max_attempts))


DEFAULT_POLICY = RetryPolicy()


async def invoke(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_POLICY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await `operation()` up to `policy.max_attempts` times.

    After failed attempt N (1-based) waits `base_delay * N`, except after the
    last attempt, whose error is re-raised. Each call is independent: no
    state is shared between invocations.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except policy.retry_on as exc:
            if attempt == policy.max_attempts:
                logger.error("Giving up after %d attempts: %r", attempt, exc)
                raise
            delay = policy.base_delay * attempt
            logger.warning(
                "Attempt %d/%d failed (%r); retrying in %.1fs",
                attempt, policy.max_attempts, exc, delay,
            )
            await sleep(delay)
    raise AssertionError("unreachable")
