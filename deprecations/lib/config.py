"""Configuration for deprecation reporting.

Reporters are validated eagerly: a Configuration cannot be constructed with
an entry that lacks ``notify``, so misconfiguration surfaces before any
method is wrapped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from deprecations.lib.errors import ConfigurationError
from deprecations.lib.reporters import is_reporter

logger = logging.getLogger(__name__)

__all__ = [
    "Configuration",
    "DEFAULT_MESSAGE_TEMPLATE",
    "DEFAULT_REFERRAL_CONTACT",
    "validate_reporter",
]

DEFAULT_MESSAGE_TEMPLATE = (
    "Method `{method_name}` is deprecated. Please refer to {referral_contact}."
)
DEFAULT_REFERRAL_CONTACT = "the project maintainers"


def validate_reporter(reporter: Any, *, field_name: str) -> Any:
    """Raise ConfigurationError unless ``reporter`` provides ``notify``."""
    if not is_reporter(reporter):
        raise ConfigurationError(
            f"Reporter for {field_name} does not provide a callable notify(event)",
            field=field_name,
            value=type(reporter).__name__,
            suggestion="Use LogReporter, RemoteTrackerReporter, NullReporter "
            "or any object with a notify(event) method.",
        )
    return reporter


@dataclass
class Configuration:
    """Settings consulted on every deprecated call.

    Owned by the host application. The reporting core only reads it; the
    host may swap a reporter with :meth:`set_reporter`.

    Attributes:
        debug_enabled: Capture a backtrace for every event
        referral_contact: Where callers should look for the replacement
        environment_reporters: Environment name -> reporter
        fallback_reporter: Used when the environment has no entry
        message_template: ``str.format`` template with ``method_name``,
            ``referral_contact`` and ``owner`` placeholders
    """

    debug_enabled: bool = False
    referral_contact: str = DEFAULT_REFERRAL_CONTACT
    environment_reporters: Mapping[str, Any] = field(default_factory=dict)
    fallback_reporter: Optional[Any] = None
    message_template: str = DEFAULT_MESSAGE_TEMPLATE

    def __post_init__(self) -> None:
        reporters: Dict[str, Any] = {}
        for environment, reporter in dict(self.environment_reporters).items():
            reporters[str(environment)] = validate_reporter(
                reporter, field_name=f"reporters.{environment}"
            )
        self.environment_reporters = MappingProxyType(reporters)

        if self.fallback_reporter is not None:
            validate_reporter(self.fallback_reporter, field_name="fallback")

        try:
            self.message_template.format(
                method_name="method", referral_contact="contact", owner="owner"
            )
        except (KeyError, IndexError, ValueError) as exc:
            raise ConfigurationError(
                f"Invalid message template: {exc}",
                field="message_template",
                value=self.message_template,
                suggestion="Only {method_name}, {referral_contact} and {owner} "
                "placeholders are available.",
            ) from exc

    def set_reporter(self, environment: str, reporter: Any) -> None:
        """Replace the reporter for ``environment``.

        The mapping is rebuilt and swapped in one assignment, so concurrent
        dispatches see either the old or the new mapping.
        """
        validate_reporter(reporter, field_name=f"reporters.{environment}")
        reporters = dict(self.environment_reporters)
        reporters[environment] = reporter
        self.environment_reporters = MappingProxyType(reporters)
        logger.info(
            "Reporter for environment '%s' set to %s",
            environment,
            type(reporter).__name__,
        )

    def format_message(self, method_name: str, owner: Optional[str] = None) -> str:
        return self.message_template.format(
            method_name=method_name,
            referral_contact=self.referral_contact,
            owner=owner or "",
        )
