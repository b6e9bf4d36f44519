"""Reporters: the pluggable backends that act on deprecation events.

Any object with a callable ``notify(event)`` is a reporter. The Reporter
base class is a convenience, not a requirement.

Example:
    from deprecations.lib.reporters import CompositeReporter, LogReporter, RemoteTrackerReporter
    from deprecations.lib.tracker import HttpTrackerClient

    production = CompositeReporter([
        LogReporter(),
        RemoteTrackerReporter(HttpTrackerClient("https://tracker.example.com/api/events")),
    ])
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import Any, ContextManager, Iterable, List, Optional, Tuple

from deprecations.lib.errors import NotificationFailure
from deprecations.lib.events import DeprecationEvent
from deprecations.lib.resilience import CircuitBreaker
from deprecations.lib.tracker import TrackerClient

__all__ = [
    "Reporter",
    "LogReporter",
    "RemoteTrackerReporter",
    "NullReporter",
    "CompositeReporter",
    "is_reporter",
    "describe_reporter",
    "TRACE_UNAVAILABLE",
]

TRACE_UNAVAILABLE = "trace unavailable"
DEFAULT_LOGGER_NAME = "deprecations"


def is_reporter(candidate: Any) -> bool:
    """Return True if ``candidate`` provides a callable ``notify``."""
    return callable(getattr(candidate, "notify", None))


class Reporter(ABC):
    """Base class for reporters."""

    @abstractmethod
    def notify(self, event: DeprecationEvent) -> None:
        """Act on a deprecation event."""
        pass

    def describe(self) -> str:
        """Short description used by the doctor CLI."""
        return self.__class__.__name__


class LogReporter(Reporter):
    """Write one log line per deprecation event.

    The event fields are also attached as ``extra`` attributes so the JSON
    formatter can emit them as structured data.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: int = logging.WARNING,
    ) -> None:
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.level = level

    @staticmethod
    def format_backtrace(backtrace: Iterable[str]) -> str:
        frames = list(backtrace)
        if not frames:
            return TRACE_UNAVAILABLE
        return " <- ".join(frames)

    def notify(self, event: DeprecationEvent) -> None:
        self.logger.log(
            self.level,
            "%s Backtrace: %s",
            event.message,
            self.format_backtrace(event.backtrace),
            extra={
                "deprecated_method": event.method_name,
                "deprecated_owner": event.owner,
                "deprecation_backtrace": list(event.backtrace),
            },
        )

    def describe(self) -> str:
        return f"LogReporter(logger={self.logger.name}, level={logging.getLevelName(self.level)})"


class RemoteTrackerReporter(Reporter):
    """Forward deprecation events to an external error-tracking service.

    Failures are not caught here; the dispatcher isolates them. With a
    circuit breaker, repeated failures make later calls fail immediately
    with CircuitBreakerOpen instead of waiting on the tracker.
    """

    def __init__(
        self,
        client: TrackerClient,
        *,
        level: str = "warning",
        breaker: Optional[CircuitBreaker] = None,
    ) -> None:
        self.client = client
        self.level = level
        self.breaker = breaker

    def notify(self, event: DeprecationEvent) -> None:
        guard: ContextManager[Any] = self.breaker if self.breaker is not None else nullcontext()
        with guard:
            self.client.capture_message(
                event.message or "",
                level=self.level,
                extra={
                    "method_name": event.method_name,
                    "owner": event.owner,
                    "backtrace": list(event.backtrace),
                },
            )

    def describe(self) -> str:
        return f"RemoteTrackerReporter(client={self.client!r}, level={self.level})"


class NullReporter(Reporter):
    """Discard every event."""

    def notify(self, event: DeprecationEvent) -> None:
        return None


class CompositeReporter(Reporter):
    """Notify several reporters in order.

    A failing member does not stop the remaining members from being
    notified. The failures are raised together afterwards.
    """

    def __init__(self, reporters: Iterable[Any]) -> None:
        self.reporters: Tuple[Any, ...] = tuple(reporters)

    def notify(self, event: DeprecationEvent) -> None:
        failures: List[Tuple[Any, Exception]] = []
        for reporter in self.reporters:
            try:
                reporter.notify(event)
            except Exception as exc:
                failures.append((reporter, exc))

        if failures:
            names = ", ".join(type(reporter).__name__ for reporter, _ in failures)
            raise NotificationFailure(
                f"{len(failures)} of {len(self.reporters)} reporters failed: {names}",
                method_name=event.method_name,
                cause=failures[0][1],
            )

    def describe(self) -> str:
        members = ", ".join(describe_reporter(reporter) for reporter in self.reporters)
        return f"CompositeReporter([{members}])"


def describe_reporter(reporter: Any) -> str:
    """Describe a reporter, falling back to its class name."""
    describe = getattr(reporter, "describe", None)
    if callable(describe):
        return str(describe())
    return type(reporter).__name__
