"""Retry handler with exponential backoff."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

T = TypeVar("T")


def _always_retry(error: BaseException) -> bool:
    return True


class RetryHandler:
    """Sequential retry loop with exponential backoff.

    Attempt ``n`` that fails with a retryable error is followed by a wait of
    ``base_delay * 2 ** (n - 1)`` seconds. A non-retryable error, or the last
    attempt failing, re-raises the original exception unchanged.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    def compute_delay(self, attempt: int) -> float:
        """Delay in seconds after a failed 1-based ``attempt``."""
        return self.base_delay * (2 ** (attempt - 1))

    async def execute(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        is_retryable: Callable[[BaseException], bool] = _always_retry,
        on_attempt: Callable[[int], None] | None = None,
        on_retry: Callable[[BaseException, int, float], None] | None = None,
        **kwargs,
    ) -> T:
        """Execute ``func`` with retry logic."""

        def before_sleep(retry_state: RetryCallState) -> None:
            if on_retry is not None:
                on_retry(
                    retry_state.outcome.exception(),
                    retry_state.attempt_number,
                    retry_state.next_action.sleep,
                )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=lambda retry_state: self.compute_delay(retry_state.attempt_number),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep,
            sleep=self.sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                if on_attempt is not None:
                    on_attempt(attempt.retry_state.attempt_number)
                result = await func(*args, **kwargs)

        return result
