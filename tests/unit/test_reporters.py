"""Tests for reporter implementations."""

import logging
from unittest.mock import MagicMock

import pytest

from deprecations.lib.errors import NotificationFailure
from deprecations.lib.events import DeprecationEvent
from deprecations.lib.reporters import (
    TRACE_UNAVAILABLE,
    CompositeReporter,
    LogReporter,
    NullReporter,
    RemoteTrackerReporter,
    describe_reporter,
    is_reporter,
)
from deprecations.lib.resilience import CircuitBreaker, CircuitBreakerOpen
from tests.conftest import FailingReporter, RecordingReporter


@pytest.fixture
def event():
    return DeprecationEvent(
        method_name="calculate",
        message="Method `calculate` is deprecated. Please refer to team lead.",
        backtrace=("app.py:10:in run", "main.py:3:in <module>"),
        owner="Calculator",
    )


class TestLogReporter:
    """Tests for LogReporter."""

    def test_writes_one_line_with_backtrace(self, event, caplog):
        """Should log message and joined backtrace."""
        reporter = LogReporter()

        with caplog.at_level(logging.WARNING, logger="deprecations"):
            reporter.notify(event)

        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message == (
            "Method `calculate` is deprecated. Please refer to team lead. "
            "Backtrace: app.py:10:in run <- main.py:3:in <module>"
        )
        assert "\n" not in message

    def test_trace_unavailable(self, caplog):
        """Should say so when there is no backtrace."""
        reporter = LogReporter()

        with caplog.at_level(logging.WARNING, logger="deprecations"):
            reporter.notify(DeprecationEvent("calculate", message="Deprecated."))

        assert caplog.records[0].getMessage() == f"Deprecated. Backtrace: {TRACE_UNAVAILABLE}"

    def test_structured_extra_fields(self, event, caplog):
        """Should attach event fields to the record."""
        with caplog.at_level(logging.WARNING, logger="deprecations"):
            LogReporter().notify(event)

        record = caplog.records[0]
        assert record.deprecated_method == "calculate"
        assert record.deprecated_owner == "Calculator"
        assert record.deprecation_backtrace == list(event.backtrace)

    def test_custom_logger_and_level(self, event, caplog):
        """Should honour the configured sink."""
        reporter = LogReporter(logging.getLogger("app.deprecations"), level=logging.INFO)

        with caplog.at_level(logging.INFO, logger="app.deprecations"):
            reporter.notify(event)

        assert caplog.records[0].name == "app.deprecations"
        assert caplog.records[0].levelno == logging.INFO


class TestRemoteTrackerReporter:
    """Tests for RemoteTrackerReporter."""

    def test_forwards_structured_metadata(self, event):
        """Should pass message, method name and backtrace to the client."""
        client = MagicMock()
        RemoteTrackerReporter(client).notify(event)

        client.capture_message.assert_called_once_with(
            event.message,
            level="warning",
            extra={
                "method_name": "calculate",
                "owner": "Calculator",
                "backtrace": ["app.py:10:in run", "main.py:3:in <module>"],
            },
        )

    def test_client_failure_propagates(self, event):
        """Failures are left for the dispatcher to isolate."""
        client = MagicMock()
        client.capture_message.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            RemoteTrackerReporter(client).notify(event)

    def test_circuit_breaker_fails_fast(self, event):
        """Should stop calling the client once the breaker opens."""
        client = MagicMock()
        client.capture_message.side_effect = TimeoutError("slow")
        reporter = RemoteTrackerReporter(
            client, breaker=CircuitBreaker(failure_threshold=2, recovery_time=60)
        )

        for _ in range(2):
            with pytest.raises(TimeoutError):
                reporter.notify(event)

        with pytest.raises(CircuitBreakerOpen):
            reporter.notify(event)
        assert client.capture_message.call_count == 2


class TestCompositeReporter:
    """Tests for CompositeReporter."""

    def test_notifies_all(self, event):
        """Every member receives the event."""
        first, second = RecordingReporter(), RecordingReporter()
        CompositeReporter([first, second]).notify(event)

        assert first.events == [event]
        assert second.events == [event]

    def test_failure_does_not_skip_others(self, event):
        """Later members are still notified; failure raised afterwards."""
        failing = FailingReporter()
        recorder = RecordingReporter()

        with pytest.raises(NotificationFailure) as exc_info:
            CompositeReporter([failing, recorder]).notify(event)

        assert recorder.events == [event]
        assert exc_info.value.cause is failing.exc
        assert "1 of 2 reporters failed" in str(exc_info.value)

    def test_describe(self):
        """Should describe members."""
        description = CompositeReporter([NullReporter(), RecordingReporter()]).describe()

        assert description == "CompositeReporter([NullReporter, RecordingReporter])"


def test_null_reporter_discards(event):
    """NullReporter accepts events silently."""
    assert NullReporter().notify(event) is None


def test_is_reporter():
    """Duck-typed capability check."""
    assert is_reporter(NullReporter())
    assert is_reporter(RecordingReporter())
    assert not is_reporter(object())


def test_describe_reporter_falls_back_to_class_name():
    """Custom reporters without describe() use their class name."""
    assert describe_reporter(RecordingReporter()) == "RecordingReporter"
    assert describe_reporter(LogReporter()).startswith("LogReporter(logger=deprecations")
