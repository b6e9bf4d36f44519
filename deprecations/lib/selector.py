"""Resolve the active reporter for an environment indicator."""

from __future__ import annotations

from typing import Any

from deprecations.lib.config import Configuration, validate_reporter
from deprecations.lib.errors import ConfigurationError

__all__ = ["ReporterSelector"]


class ReporterSelector:
    """Look up reporters in a Configuration.

    Entries were validated when the Configuration was built. The mapping is
    read on every call so a reporter swapped in by the host takes effect on
    the next notification.
    """

    def __init__(self, configuration: Configuration) -> None:
        self.configuration = configuration

    def resolve(self, environment: str) -> Any:
        """Return the reporter mapped to ``environment``.

        Raises:
            ConfigurationError: No entry for ``environment`` and no fallback
        """
        reporter = self.configuration.environment_reporters.get(environment)
        if reporter is None:
            reporter = self.configuration.fallback_reporter
        if reporter is None:
            known = ", ".join(sorted(self.configuration.environment_reporters)) or "none"
            raise ConfigurationError(
                f"No reporter configured for environment '{environment}'",
                field="reporters",
                value=environment,
                details={"configured_environments": known},
                suggestion="Add a reporter for this environment or configure a fallback.",
            )
        return validate_reporter(reporter, field_name=f"reporters.{environment}")
