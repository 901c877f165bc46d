"""Outbound call policy: minimum-interval gate, retry with backoff, and
mapping of SDK/transport exceptions onto the ``AIError`` hierarchy."""
from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from openai import APIConnectionError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from chartwise.domain.exceptions import (
    AIAuthenticationError,
    AIError,
    AIRateLimitError,
    AIRequestError,
    AITransientError,
    LocalRateLimitError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MinIntervalGate:
    """Rejects a call issued less than ``min_interval`` seconds after the
    previous accepted one. Premature calls fail fast; nothing is queued."""

    def __init__(self, min_interval: float = 2.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._last_call: float | None = None
        self._lock = threading.Lock()

    def acquire(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last_call is not None:
                remaining = self.min_interval - (now - self._last_call)
                if remaining > 0:
                    raise LocalRateLimitError(math.ceil(remaining))
            self._last_call = now

    def reset(self) -> None:
        with self._lock:
            self._last_call = None


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, AIError) and exc.retryable


class RetryPolicy:
    """Retries transient failures with exponential backoff
    (``base_delay * 2**n``). Everything else surfaces on the first attempt."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self._sleep = sleep

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2, min=0),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        return retrying(fn, *args, **kwargs)


def classify_llm_error(exc: Exception) -> Exception:
    """Translate an SDK or transport exception into an ``AIError``.

    Unknown exceptions are returned unchanged so the caller re-raises them.
    """
    if isinstance(exc, AIError):
        return exc

    status = getattr(exc, "status_code", None)
    detail = str(getattr(exc, "message", None) or exc)
    if isinstance(status, int):
        if status in (401, 403):
            return AIAuthenticationError("Invalid OpenAI API key. Please check your configuration.")
        if status == 429:
            return AIRateLimitError("Rate limit exceeded. Please try again in a few moments.")
        if 400 <= status < 500:
            return AIRequestError(f"OpenAI rejected the request ({status}): {detail}", status_code=status)
        if status >= 500:
            return AITransientError(
                f"OpenAI service is temporarily unavailable ({status}). Please try again later."
            )

    if isinstance(exc, (APIConnectionError, httpx.TransportError, ConnectionError, TimeoutError)):
        return AITransientError(f"Could not reach OpenAI: {detail}")
    return exc
