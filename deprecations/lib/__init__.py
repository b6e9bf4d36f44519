"""Deprecation reporting library modules.

This package contains the interception, dispatch and reporter-selection
machinery plus its configuration, logging and resilience helpers.
"""

from deprecations.lib.config import (
    DEFAULT_MESSAGE_TEMPLATE,
    DEFAULT_REFERRAL_CONTACT,
    Configuration,
    validate_reporter,
)
from deprecations.lib.config_loader import (
    REPORTER_TYPES,
    build_reporter,
    load_configuration,
    load_configuration_from_dict,
)
from deprecations.lib.deprecator import Deprecations
from deprecations.lib.dispatcher import DeprecationDispatcher, capture_backtrace
from deprecations.lib.env import (
    environment_from_env,
    expand_env_vars,
    expand_options,
    load_env_file,
    static_environment,
)
from deprecations.lib.errors import (
    ConfigurationError,
    DeprecationsError,
    NotificationFailure,
    exception_text,
)
from deprecations.lib.events import DeprecationEvent
from deprecations.lib.interceptor import MethodInterceptor, WrappedMethod, is_deprecated
from deprecations.lib.logging import JSONFormatter, setup_logging
from deprecations.lib.reporters import (
    CompositeReporter,
    LogReporter,
    NullReporter,
    RemoteTrackerReporter,
    Reporter,
    describe_reporter,
    is_reporter,
)
from deprecations.lib.resilience import CircuitBreaker, CircuitBreakerOpen
from deprecations.lib.selector import ReporterSelector
from deprecations.lib.tracker import HttpTrackerClient, TrackerClient

__all__ = [
    # Configuration
    "Configuration",
    "DEFAULT_MESSAGE_TEMPLATE",
    "DEFAULT_REFERRAL_CONTACT",
    "validate_reporter",
    "REPORTER_TYPES",
    "build_reporter",
    "load_configuration",
    "load_configuration_from_dict",
    # Core
    "Deprecations",
    "DeprecationDispatcher",
    "DeprecationEvent",
    "MethodInterceptor",
    "ReporterSelector",
    "WrappedMethod",
    "capture_backtrace",
    "is_deprecated",
    # Environment
    "environment_from_env",
    "expand_env_vars",
    "expand_options",
    "load_env_file",
    "static_environment",
    # Errors
    "ConfigurationError",
    "DeprecationsError",
    "NotificationFailure",
    "exception_text",
    # Logging
    "JSONFormatter",
    "setup_logging",
    # Reporters
    "CompositeReporter",
    "LogReporter",
    "NullReporter",
    "RemoteTrackerReporter",
    "Reporter",
    "describe_reporter",
    "is_reporter",
    # Remote tracking
    "CircuitBreaker",
    "CircuitBreakerOpen",
    "HttpTrackerClient",
    "TrackerClient",
]
