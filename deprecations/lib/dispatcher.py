"""Dispatch deprecation events to the active reporter.

The dispatcher is the failure boundary between deprecated methods and
reporting: whatever goes wrong while resolving the environment, choosing
the reporter or notifying it, the caller of the deprecated method never
sees it. The failure is logged once and dropped.
"""

from __future__ import annotations

import logging
import os
import traceback
from typing import List, Optional

from deprecations.lib.config import Configuration
from deprecations.lib.env import EnvironmentProvider
from deprecations.lib.errors import NotificationFailure, exception_text
from deprecations.lib.events import DeprecationEvent
from deprecations.lib.selector import ReporterSelector

logger = logging.getLogger(__name__)

__all__ = ["DeprecationDispatcher", "capture_backtrace"]

# Frames from these files belong to the reporting machinery, not the caller
_INTERNAL_MODULES = ("dispatcher", "interceptor")
_INTERNAL_FILES = frozenset(
    os.path.normcase(os.path.join(os.path.dirname(os.path.abspath(__file__)), f"{name}.py"))
    for name in _INTERNAL_MODULES
)


def _is_internal(filename: str) -> bool:
    return os.path.normcase(os.path.abspath(filename)) in _INTERNAL_FILES


def capture_backtrace(limit: Optional[int] = None) -> List[str]:
    """Describe the current call stack, most recent call first.

    Frames of the dispatcher and interceptor modules are dropped, so the
    first entry is the caller of the deprecated method.
    """
    frames = [
        frame
        for frame in reversed(traceback.extract_stack())
        if not _is_internal(frame.filename)
    ]
    if limit is not None:
        frames = frames[:limit]
    return [f"{frame.filename}:{frame.lineno}:in {frame.name}" for frame in frames]


class DeprecationDispatcher:
    """Complete deprecation events and hand them to a reporter.

    Args:
        configuration: Settings shared with the selector
        environment: Zero-argument callable returning the environment name
        selector: Optional selector; built from ``configuration`` if omitted
        backtrace_limit: Maximum number of frames captured in debug mode
    """

    def __init__(
        self,
        configuration: Configuration,
        environment: EnvironmentProvider,
        selector: Optional[ReporterSelector] = None,
        backtrace_limit: Optional[int] = None,
    ) -> None:
        self.configuration = configuration
        self.environment = environment
        self.selector = selector or ReporterSelector(configuration)
        self.backtrace_limit = backtrace_limit

    def build_message(self, event: DeprecationEvent) -> str:
        """Return the event message, synthesizing one if it is empty."""
        if event.message:
            return event.message
        return self.configuration.format_message(event.method_name, event.owner)

    def prepare(self, event: DeprecationEvent) -> DeprecationEvent:
        """Return a copy of ``event`` with message and backtrace resolved.

        The stack is only walked when debug mode is enabled.
        """
        resolved = event.with_message(self.build_message(event))
        if self.configuration.debug_enabled:
            resolved = resolved.with_backtrace(capture_backtrace(self.backtrace_limit))
        elif resolved.backtrace:
            resolved = resolved.with_backtrace(())
        return resolved

    def dispatch(self, event: DeprecationEvent) -> None:
        """Notify the active reporter about ``event``. Never raises."""
        environment: Optional[str] = None
        try:
            resolved = self.prepare(event)
            environment = self.environment()
            reporter = self.selector.resolve(environment)
            reporter.notify(resolved)
        except Exception as exc:
            try:
                self._record_failure(event, environment, exc)
            except Exception:
                logger.warning(
                    "Deprecation notification failed for %s; failure could not be described",
                    event.qualified_name,
                )

    def _record_failure(
        self,
        event: DeprecationEvent,
        environment: Optional[str],
        exc: Exception,
    ) -> None:
        failure = NotificationFailure(
            "Deprecation notification failed",
            method_name=event.qualified_name,
            environment=environment,
            cause=exc,
        )
        logger.warning(
            "Deprecation notification failed for %s (environment=%s): %s: %s",
            event.qualified_name,
            environment or "unresolved",
            type(exc).__name__,
            exception_text(exc),
            exc_info=exc if logger.isEnabledFor(logging.DEBUG) else None,
            extra={"notification_failure": failure.to_dict()},
        )
