"""Tests for the HTTP tracker client."""

import json

import httpx
import pytest

from deprecations.lib.events import DeprecationEvent
from deprecations.lib.reporters import RemoteTrackerReporter
from deprecations.lib.tracker import HttpTrackerClient


def _client(handler, **kwargs):
    return HttpTrackerClient(
        "https://tracker.example.com/api/events",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestHttpTrackerClient:
    """Tests for HttpTrackerClient."""

    def test_posts_json_payload(self):
        """Should POST message, level, extra and timestamp."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(202)

        client = _client(handler, environment="production")
        client.capture_message("Deprecated.", level="warning", extra={"method_name": "calculate"})

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://tracker.example.com/api/events"
        payload = json.loads(request.content)
        assert payload["message"] == "Deprecated."
        assert payload["level"] == "warning"
        assert payload["extra"] == {"method_name": "calculate"}
        assert payload["environment"] == "production"
        assert payload["timestamp"].endswith("Z")

    def test_headers(self):
        """Should send auth and user agent headers."""
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200)

        _client(handler, api_key="secret").capture_message("Deprecated.")

        assert seen["authorization"] == "Bearer secret"
        assert seen["user-agent"].startswith("deprecation-sentinel/")

    def test_no_auth_header_without_key(self):
        """Should omit Authorization when no key is configured."""
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200)

        _client(handler).capture_message("Deprecated.")

        assert "authorization" not in seen

    def test_error_status_raises(self):
        """Non-2xx responses should raise."""
        client = _client(lambda request: httpx.Response(503))

        with pytest.raises(httpx.HTTPStatusError):
            client.capture_message("Deprecated.")

    def test_transport_error_raises(self):
        """Connection errors should raise."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(httpx.ConnectError):
            _client(handler).capture_message("Deprecated.")

    def test_timeout_configured(self):
        """Should apply the configured timeout to the client."""
        client = _client(lambda request: httpx.Response(200), timeout=0.5)

        assert client.timeout == 0.5
        assert client._client.timeout.read == 0.5

    def test_context_manager_closes(self):
        """Should close the underlying client on exit."""
        with _client(lambda request: httpx.Response(200)) as client:
            client.capture_message("Deprecated.")

        assert client._client.is_closed


def test_remote_reporter_end_to_end():
    """RemoteTrackerReporter should deliver events through the HTTP client."""
    payloads = []

    def handler(request):
        payloads.append(json.loads(request.content))
        return httpx.Response(200)

    reporter = RemoteTrackerReporter(_client(handler))
    reporter.notify(
        DeprecationEvent("calculate", message="Deprecated.", backtrace=("app.py:1:in run",))
    )

    assert payloads[0]["extra"] == {
        "method_name": "calculate",
        "owner": None,
        "backtrace": ["app.py:1:in run"],
    }
