"""Resilience utilities for remote reporting.

Deprecated methods can sit on hot paths. When the tracking service is
down, every call would otherwise wait out the HTTP timeout before the
dispatcher logs the failure. The circuit breaker turns a dead tracker into
immediate failures until it has had time to recover.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Literal, Optional, Type

logger = logging.getLogger(__name__)

__all__ = ["CircuitBreaker", "CircuitBreakerOpen"]


class CircuitBreaker:
    """Thread-safe circuit breaker guarding calls to an unreliable service.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: Failing fast, requests immediately fail
    - HALF_OPEN: Testing if service recovered

    Example:
        breaker = CircuitBreaker(failure_threshold=5, recovery_time=60)

        with breaker:
            client.capture_message(message)
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_time: float = 60.0,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_time = recovery_time
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = "CLOSED"
        self._lock = threading.Lock()

    def _check_state(self) -> None:
        """Check and possibly transition circuit state."""
        if self.state == "OPEN":
            if self.last_failure_time:
                elapsed = time.monotonic() - self.last_failure_time
                if elapsed >= self.recovery_time:
                    logger.info("Circuit breaker transitioning to HALF_OPEN")
                    self.state = "HALF_OPEN"

    def __enter__(self) -> "CircuitBreaker":
        with self._lock:
            self._check_state()

            if self.state == "OPEN":
                raise CircuitBreakerOpen("Circuit breaker is OPEN - failing fast")

        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> Literal[False]:
        with self._lock:
            if exc_type is not None:
                self.failure_count += 1
                self.last_failure_time = time.monotonic()

                if self.state == "HALF_OPEN":
                    logger.warning(
                        "Circuit breaker returning to OPEN after HALF_OPEN failure"
                    )
                    self.state = "OPEN"
                elif (
                    self.state == "CLOSED"
                    and self.failure_count >= self.failure_threshold
                ):
                    logger.warning(
                        "Circuit breaker opening after %d failures",
                        self.failure_count,
                    )
                    self.state = "OPEN"
            else:
                if self.state == "HALF_OPEN":
                    logger.info("Circuit breaker recovered - transitioning to CLOSED")
                self.failure_count = 0
                self.state = "CLOSED"

        return False


class CircuitBreakerOpen(Exception):
    """Exception raised when circuit breaker is open."""

    pass
