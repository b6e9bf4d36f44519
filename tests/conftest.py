"""Pytest configuration and fixtures."""

from __future__ import annotations

import threading
from typing import List

import pytest

from deprecations.lib.config import Configuration
from deprecations.lib.deprecator import Deprecations
from deprecations.lib.env import static_environment
from deprecations.lib.events import DeprecationEvent


class RecordingReporter:
    """Reporter that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: List[DeprecationEvent] = []
        self._lock = threading.Lock()

    def notify(self, event: DeprecationEvent) -> None:
        with self._lock:
            self.events.append(event)

    @property
    def messages(self) -> List[str]:
        return [event.message or "" for event in self.events]


class FailingReporter:
    """Reporter whose notify always raises."""

    def __init__(self, exc: Exception = None) -> None:
        self.exc = exc or ConnectionError("tracker unreachable")
        self.calls = 0

    def notify(self, event: DeprecationEvent) -> None:
        self.calls += 1
        raise self.exc


@pytest.fixture
def recorder() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def configuration(recorder: RecordingReporter) -> Configuration:
    return Configuration(
        referral_contact="team lead",
        environment_reporters={"test": recorder},
    )


@pytest.fixture
def deprecations(configuration: Configuration) -> Deprecations:
    return Deprecations(configuration, environment=static_environment("test"))
