"""Structured exception hierarchy for deprecation reporting.

Configuration problems are raised loudly at setup time. Notification
problems are wrapped in NotificationFailure and only ever logged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "DeprecationsError",
    "ConfigurationError",
    "NotificationFailure",
    "exception_text",
]


class DeprecationsError(Exception):
    """Base exception for all deprecation reporting errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class ConfigurationError(DeprecationsError):
    """Error in deprecation configuration.

    Raised when a method cannot be wrapped, a reporter does not provide
    ``notify``, or no reporter is mapped for the current environment.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value) if not isinstance(value, str) else value

        super().__init__(message, details=details, **kwargs)


class NotificationFailure(DeprecationsError):
    """A reporter failed while handling a deprecation event.

    Never propagated to the caller of a deprecated method.
    """

    def __init__(
        self,
        message: str,
        *,
        method_name: Optional[str] = None,
        environment: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        self.method_name = method_name
        self.environment = environment
        self.cause = cause

        details = kwargs.pop("details", {})
        if method_name:
            details["method_name"] = method_name
        if environment:
            details["environment"] = environment
        if cause is not None:
            details["cause"] = exception_text(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details=details, **kwargs)


def exception_text(exc: BaseException) -> str:
    """Return ``str(exc)``, or a placeholder when the exception cannot render itself."""
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__}>"
