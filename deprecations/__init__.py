"""Report calls to deprecated methods through environment-specific reporters.

Usage:
    from deprecations import Configuration, Deprecations, LogReporter

    deprecations = Deprecations(
        Configuration(environment_reporters={"development": LogReporter()}),
    )
    deprecations.declare_deprecated(Calculator, "calculate")

    python -m deprecations deprecations.yaml --all
"""

from deprecations.lib.config import Configuration
from deprecations.lib.config_loader import load_configuration
from deprecations.lib.deprecator import Deprecations
from deprecations.lib.errors import ConfigurationError, NotificationFailure
from deprecations.lib.events import DeprecationEvent
from deprecations.lib.reporters import (
    CompositeReporter,
    LogReporter,
    NullReporter,
    RemoteTrackerReporter,
    Reporter,
)

__all__ = [
    "Configuration",
    "ConfigurationError",
    "CompositeReporter",
    "DeprecationEvent",
    "Deprecations",
    "LogReporter",
    "NotificationFailure",
    "NullReporter",
    "RemoteTrackerReporter",
    "Reporter",
    "load_configuration",
]
