"""
Resilience utilities for HirePrep.

Retry with exponential backoff, sliding-window rate limiting and a circuit
breaker. The AI coach wraps every provider call with these; any failure
they report sends the caller to the local fallback.
"""

import functools
import random
import threading
import time
from collections import deque
from typing import Callable, Optional, Tuple, Type

from hireprep.logging_config import get_logger

logger = get_logger(__name__)


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, last_exception: Optional[Exception] = None):
        super().__init__(message)
        self.last_exception = last_exception


class CircuitOpenError(RetryError):
    """Raised when a call is refused because the circuit is open."""


class RateLimitExceeded(RetryError):
    """Raised when a rate limiter slot could not be acquired in time."""


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator for retry with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (0 = single attempt)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay cap in seconds
        exponential_base: Base for exponential calculation
        jitter: Add random jitter to prevent thundering herd
        retryable_exceptions: Tuple of exceptions to retry on
        on_retry: Optional callback called on each retry (exception, attempt)
        sleep: Sleep function (replaceable in tests)

    Usage:
        @retry_with_backoff(max_retries=3, base_delay=1.0)
        def flaky_api_call():
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt == max_retries:
                        logger.error(
                            f"All {max_retries} retries exhausted for {func.__name__}: {e}"
                        )
                        raise RetryError(
                            f"Failed after {max_retries} retries: {e}", last_exception=e
                        )

                    delay = min(base_delay * (exponential_base**attempt), max_delay)

                    # Add jitter (±25% of delay)
                    if jitter:
                        delay = delay * (0.75 + random.random() * 0.5)

                    logger.warning(
                        f"Retry {attempt + 1}/{max_retries} for {func.__name__} "
                        f"after {delay:.2f}s delay. Error: {e}"
                    )

                    if on_retry:
                        on_retry(e, attempt + 1)

                    sleep(delay)

        return wrapper

    return decorator


class RateLimiter:
    """
    Sliding window rate limiter for API calls.

    Allows at most ``calls_per_minute`` calls in any 60 second window.
    """

    def __init__(self, calls_per_minute: int = 60, clock: Callable[[], float] = time.monotonic):
        self.calls_per_minute = calls_per_minute
        self._clock = clock
        self._lock = threading.Lock()
        self._call_times: deque = deque()

    def try_acquire(self) -> bool:
        """Take a slot if one is free right now."""
        with self._lock:
            now = self._clock()
            while self._call_times and self._call_times[0] <= now - 60:
                self._call_times.popleft()
            if len(self._call_times) < self.calls_per_minute:
                self._call_times.append(now)
                return True
            return False

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """
        Acquire permission to make a call, blocking if necessary.

        Args:
            timeout: Maximum time to wait in seconds (None for infinite)

        Returns:
            True if acquired, False if timeout exceeded
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self.try_acquire():
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(0.05)
        return True

    def __call__(self, func: Callable) -> Callable:
        """Use as decorator."""

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            self.acquire()
            return func(*args, **kwargs)

        return wrapper


class CircuitBreaker:
    """
    Circuit breaker pattern for failing fast on repeated errors.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: Circuit is broken, requests fail immediately
    - HALF_OPEN: Testing if service recovered
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        success_threshold: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            failure_threshold: Failures before opening circuit
            recovery_timeout: Seconds before attempting recovery
            success_threshold: Successes needed to close circuit
            clock: Monotonic time source
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.success_threshold = success_threshold
        self._clock = clock

        self._state = self.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        """Get current circuit state."""
        with self._lock:
            if self._state == self.OPEN:
                if (
                    self._last_failure_time is not None
                    and self._clock() - self._last_failure_time >= self.recovery_timeout
                ):
                    self._state = self.HALF_OPEN
                    self._success_count = 0
            return self._state

    def record_success(self):
        with self._lock:
            if self._state == self.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.success_threshold:
                    self._state = self.CLOSED
                    self._failure_count = 0
                    logger.info("Circuit breaker closed after successful recovery")
            elif self._state == self.CLOSED:
                self._failure_count = 0

    def record_failure(self):
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()

            if self._state == self.HALF_OPEN:
                self._state = self.OPEN
                logger.warning("Circuit breaker re-opened after failure in half-open state")
            elif self._state == self.CLOSED and self._failure_count >= self.failure_threshold:
                self._state = self.OPEN
                logger.warning(f"Circuit breaker opened after {self._failure_count} failures")

    def call(self, func: Callable, *args, **kwargs):
        """Invoke ``func`` through the breaker."""
        if self.state == self.OPEN:
            raise CircuitOpenError("Circuit breaker is open - service temporarily unavailable")

        try:
            result = func(*args, **kwargs)
        except Exception:
            self.record_failure()
            raise
        self.record_success()
        return result

    def __call__(self, func: Callable) -> Callable:
        """Use as decorator."""

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return self.call(func, *args, **kwargs)

        return wrapper
