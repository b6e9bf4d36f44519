"""Deprecation event record passed from the dispatcher to reporters."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence, Tuple

__all__ = ["DeprecationEvent"]


@dataclass(frozen=True)
class DeprecationEvent:
    """One invocation of a deprecated method.

    Built fresh by the interceptor for every call with only ``method_name``
    (and ``owner``) set. The dispatcher derives a resolved copy carrying the
    message and, in debug mode, the backtrace.
    """

    method_name: str
    message: Optional[str] = None
    backtrace: Tuple[str, ...] = ()
    owner: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """Method name prefixed with its owner, when known."""
        if self.owner:
            return f"{self.owner}.{self.method_name}"
        return self.method_name

    def with_message(self, message: str) -> "DeprecationEvent":
        return replace(self, message=message)

    def with_backtrace(self, backtrace: Sequence[str]) -> "DeprecationEvent":
        return replace(self, backtrace=tuple(backtrace))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "method_name": self.method_name,
            "owner": self.owner,
            "message": self.message,
            "backtrace": list(self.backtrace),
        }
