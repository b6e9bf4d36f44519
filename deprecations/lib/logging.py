"""Logging utilities for deprecation reporting.

Provides structured JSON logging option for production environments.
Deprecation context attached by LogReporter, and notification failures
logged by the dispatcher, are promoted to their own top-level keys so log
aggregators can query them without digging through ``extra``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

__all__ = [
    "setup_logging",
    "JSONFormatter",
]

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# record attribute -> key inside the top-level "deprecation" object
_DEPRECATION_FIELDS = {
    "deprecated_method": "method",
    "deprecated_owner": "owner",
    "deprecation_backtrace": "backtrace",
}
_FAILURE_FIELD = "notification_failure"


class JSONFormatter(logging.Formatter):
    """Formatter that outputs log records as JSON.

    Useful for log aggregation systems like ELK, Splunk, or CloudWatch.

    Example output:
        {"timestamp": "2025-01-15T10:30:00.123Z", "level": "WARNING",
         "logger": "deprecations", "message": "Method `calculate` is deprecated. ...",
         "deprecation": {"method": "calculate", "owner": "Calculator", "backtrace": []}}
    """

    def __init__(self, exclude_fields: Optional[List[str]] = None):
        """Initialize JSON formatter.

        Args:
            exclude_fields: Extra fields to leave out of the output
        """
        super().__init__()
        self.exclude_fields = set(exclude_fields or [])

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_attrs = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _RESERVED_ATTRS and k not in self.exclude_fields
        }

        deprecation = {
            key: extra_attrs.pop(attr)
            for attr, key in _DEPRECATION_FIELDS.items()
            if attr in extra_attrs
        }
        if deprecation:
            log_data["deprecation"] = deprecation

        if _FAILURE_FIELD in extra_attrs:
            log_data["failure"] = extra_attrs.pop(_FAILURE_FIELD)

        if extra_attrs:
            log_data["extra"] = extra_attrs

        return json.dumps(log_data, default=str)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure the root logger.

    Args:
        verbose: Enable debug-level logging
        json_format: Use JSON output format (for log aggregation)
        log_file: Optional file path to write logs to
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
