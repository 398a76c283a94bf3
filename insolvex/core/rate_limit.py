"""Bounded concurrency and backoff for vision-model calls.

Only transient upstream failures (overload, quota, timeouts, dropped
connections) are retried. Everything else fails on the first attempt.
"""
import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

import anyio
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Lowercased fragments of error messages returned by the Gemini API and its HTTP layer.
TRANSIENT_MARKERS = (
    "429",
    "500",
    "502",
    "503",
    "504",
    "resource_exhausted",
    "unavailable",
    "deadline exceeded",
    "timed out",
    "connection",
    "server error",
)


class RetryError(Exception):
    """Raised when an operation gives up; carries the last underlying error."""

    def __init__(self, operation_name: str, last_exception: Exception, attempts: int):
        self.operation_name = operation_name
        self.last_exception = last_exception
        self.attempts = attempts
        super().__init__(f"{operation_name} gave up after {attempts} attempt(s): {last_exception}")


class RetryPolicy(BaseModel):
    """Exponential backoff with additive jitter."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=2.0, ge=0)
    max_delay: float = Field(default=10.0, ge=0)
    jitter_range: float = Field(default=3.0, ge=0)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given zero-based failed attempt."""
        delay = min(self.max_delay, self.base_delay * (2 ** attempt))
        return delay + random.uniform(0, self.jitter_range)


def is_transient_error(exc: BaseException) -> bool:
    """True for failures worth retrying: timeouts, dropped connections, 429/5xx replies."""
    if isinstance(exc, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    should_retry: Callable[[BaseException], bool] = is_transient_error,
    operation_name: str = "operation",
    log: logging.Logger | None = None
) -> T:
    """Await ``operation`` until it succeeds, fails permanently or runs out of attempts.

    Raises:
        RetryError: Wrapping the last exception in either failure case
    """
    policy = policy or RetryPolicy()
    log = log or logger

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except Exception as exc:
            if not should_retry(exc):
                log.error(f"[RETRY] {operation_name} - Permanent failure: {str(exc)[:150]}")
                raise RetryError(operation_name, exc, attempt + 1) from exc
            if attempt == policy.max_attempts - 1:
                log.error(
                    f"[RETRY] {operation_name} - Exhausted retries ({policy.max_attempts}): "
                    f"{str(exc)[:150]}"
                )
                raise RetryError(operation_name, exc, policy.max_attempts) from exc

            wait = policy.delay_for(attempt)
            log.warning(
                f"[RETRY] {operation_name} - Attempt {attempt + 1}/{policy.max_attempts} failed: "
                f"{str(exc)[:100]}. Retrying in {wait:.1f}s..."
            )
            await asyncio.sleep(wait)

    raise AssertionError("unreachable: max_attempts >= 1")


class RateLimitedExecutor:
    """Caps concurrent model calls and retries transient failures.

    The capacity slot is held for one attempt only, so a call sleeping
    between retries does not block others.
    """

    def __init__(
        self,
        capacity: int,
        policy: RetryPolicy | None = None,
        should_retry: Callable[[BaseException], bool] = is_transient_error
    ):
        self.capacity = capacity
        self.policy = policy or RetryPolicy()
        self.should_retry = should_retry
        self._limiter: anyio.CapacityLimiter | None = None
        self.calls_started = 0
        self.calls_failed = 0

    @property
    def limiter(self) -> anyio.CapacityLimiter:
        # Created on first use so it binds to the running event loop.
        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(self.capacity)
        return self._limiter

    async def execute(self, operation: Callable[[], Awaitable[T]], operation_name: str = "operation") -> T:
        async def one_attempt():
            async with self.limiter:
                self.calls_started += 1
                return await operation()

        try:
            return await retry_with_backoff(
                one_attempt,
                policy=self.policy,
                should_retry=self.should_retry,
                operation_name=operation_name
            )
        except RetryError:
            self.calls_failed += 1
            raise

    @property
    def stats(self) -> dict:
        return {
            "total_capacity": self.limiter.total_tokens,
            "borrowed_capacity": self.limiter.borrowed_tokens,
            "available_capacity": self.limiter.available_tokens,
            "calls_started": self.calls_started,
            "calls_failed": self.calls_failed,
        }


def create_gemini_executor(quota_limit: int = 5, policy: RetryPolicy | None = None) -> RateLimitedExecutor:
    """Executor for Gemini calls: ``quota_limit`` concurrent requests."""
    return RateLimitedExecutor(capacity=quota_limit, policy=policy)
