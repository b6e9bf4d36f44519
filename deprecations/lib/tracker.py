"""Clients for external error-tracking services.

RemoteTrackerReporter talks to a TrackerClient rather than a specific
vendor SDK. HttpTrackerClient is a minimal adapter that POSTs each message
as JSON to an ingestion endpoint; hosts using a vendor SDK can implement
TrackerClient around it instead.

Example:
    from deprecations.lib.tracker import HttpTrackerClient

    client = HttpTrackerClient(
        endpoint="https://tracker.example.com/api/events",
        api_key="${TRACKER_API_KEY}",
        timeout=2.0,
    )
    client.capture_message("Method `calculate` is deprecated.", level="warning")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
import requests_toolbelt
from requests_toolbelt.utils.user_agent import user_agent

logger = logging.getLogger(__name__)

__all__ = ["TrackerClient", "HttpTrackerClient", "DEFAULT_TRACKER_TIMEOUT"]

DEFAULT_TRACKER_TIMEOUT = 2.0

_USER_AGENT = user_agent(
    "deprecation-sentinel",
    "1.0.0",
    extras=[
        ("httpx", getattr(httpx, "__version__", "unknown")),
        ("requests-toolbelt", getattr(requests_toolbelt, "__version__", "unknown")),
    ],
)


class TrackerClient(ABC):
    """Interface of an external error-tracking service client."""

    @abstractmethod
    def capture_message(
        self,
        message: str,
        level: str = "warning",
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Send a message with structured metadata to the tracker.

        Args:
            message: Human-readable message
            level: Severity level (debug, info, warning, error)
            extra: Additional structured metadata

        Raises:
            Any transport or service error. Callers decide how to isolate it.
        """
        pass


class HttpTrackerClient(TrackerClient):
    """Send tracker messages as JSON over HTTP.

    The request timeout bounds how long a deprecated call can be held up
    by the tracker. Non-2xx responses raise ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TRACKER_TIMEOUT,
        environment: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.environment = environment

        headers = {"User-Agent": _USER_AGENT, "Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.Client(
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def capture_message(
        self,
        message: str,
        level: str = "warning",
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload: Dict[str, Any] = {
            "message": message,
            "level": level,
            "extra": extra or {},
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if self.environment:
            payload["environment"] = self.environment

        logger.debug("Posting tracker message to %s", self.endpoint)
        response = self._client.post(self.endpoint, json=payload)
        response.raise_for_status()

    def close(self) -> None:
        """Release pooled connections."""
        self._client.close()

    def __enter__(self) -> "HttpTrackerClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"HttpTrackerClient(endpoint={self.endpoint!r}, timeout={self.timeout})"
