"""Retry with exponential backoff for calls to the database and the identity provider.

Usage:
    @retry(max_attempts=5, initial_delay=1.0, exceptions=(OSError,))
    async def connect() -> None:
        ...
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from prometheus_client import Counter

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

retry_attempts_total = Counter(
    "retry_attempts_total",
    "Retries performed after a failed call",
    ["function"],
)
"""Retries performed, per decorated function.

Labels:
    - function: Name of the decorated coroutine function
"""

retry_exhausted_total = Counter(
    "retry_exhausted_total",
    "Calls that failed after every retry attempt",
    ["function"],
)
"""Calls that ran out of attempts, per decorated function."""


class RetryError(Exception):
    """Every attempt failed with a retryable exception."""

    def __init__(self, last_exception: Exception, attempts: int) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_exception}")


@dataclass(frozen=True)
class Backoff:
    """Delay before retry ``n`` (0-based): ``initial * base**n`` capped at ``maximum``, then jittered.

    Examples:
        >>> Backoff(initial=1.0, maximum=3.0, jitter=False).delay(2)
        3.0
    """

    initial: float = 1.0
    maximum: float = 60.0
    base: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        delay = min(self.initial * self.base**attempt, self.maximum)
        if self.jitter:
            delay *= random.uniform(0.5, 1.5)
        return delay


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    *,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable when it raises one of ``exceptions``.

    Other exceptions propagate on the first attempt.

    Raises:
        RetryError: When ``max_attempts`` attempts all failed.
    """
    backoff = Backoff(initial=initial_delay, maximum=max_delay, jitter=jitter)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        name = func.__name__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as exc:
                    attempt += 1
                    if attempt >= max_attempts:
                        retry_exhausted_total.labels(function=name).inc()
                        logger.error(
                            f"All retry attempts exhausted for {name}",
                            extra={"function": name, "attempts": attempt, "last_exception": str(exc)},
                        )
                        raise RetryError(exc, attempt) from exc

                    delay = backoff.delay(attempt - 1)
                    retry_attempts_total.labels(function=name).inc()
                    logger.warning(
                        f"Retrying {name} after {delay:.2f}s (attempt {attempt}/{max_attempts})",
                        extra={"function": name, "attempt": attempt, "delay": delay, "exception": str(exc)},
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
