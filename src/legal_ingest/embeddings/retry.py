"""Bounded retry for provider calls, built on tenacity."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from legal_ingest.errors import RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Attempt %d failed (%s), waiting %.1fs before retry",
        retry_state.attempt_number, exc, wait,
    )


@dataclass
class RetryPolicy:
    """Fixed-backoff retry limited to ``max_attempts`` total calls.

    Only exceptions of ``retry_on`` are retried; anything else, and the
    last retryable failure, is re-raised unchanged.
    """

    max_attempts: int = 2
    backoff_seconds: float = 5.0
    retry_on: tuple[type[BaseException], ...] = (RateLimitError,)
    sleep: Callable[[float], Any] = time.sleep

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.backoff_seconds),
            retry=retry_if_exception_type(self.retry_on),
            sleep=self.sleep,
            before_sleep=_log_before_sleep,
            reraise=True,
        )
        return retryer(fn, *args, **kwargs)
