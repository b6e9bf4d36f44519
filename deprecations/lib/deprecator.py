"""Entry point for declaring deprecated methods.

Example:
    from deprecations import Configuration, Deprecations, LogReporter, NullReporter
    from deprecations.lib.env import environment_from_env

    deprecations = Deprecations(
        Configuration(
            referral_contact="the migration guide",
            environment_reporters={
                "development": LogReporter(),
                "test": NullReporter(),
            },
        ),
        environment=environment_from_env(),
    )

    @deprecations.deprecated_methods("calculate")
    class Calculator:
        def calculate(self, x):
            return x * 2
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from deprecations.lib.config import Configuration
from deprecations.lib.dispatcher import DeprecationDispatcher
from deprecations.lib.env import EnvironmentProvider, environment_from_env
from deprecations.lib.errors import ConfigurationError
from deprecations.lib.interceptor import MethodInterceptor, WrappedMethod
from deprecations.lib.selector import ReporterSelector

logger = logging.getLogger(__name__)

__all__ = ["Deprecations"]

T = TypeVar("T")


class Deprecations:
    """Wire configuration, selector, dispatcher and interceptor together.

    There is no module-level instance; the host builds one and passes it
    where deprecations are declared.

    Args:
        configuration: Reporting configuration
        environment: Environment-indicator provider. Defaults to reading
            DEPRECATIONS_ENV / APP_ENV / ENV.
        backtrace_limit: Maximum frames captured in debug mode
    """

    def __init__(
        self,
        configuration: Configuration,
        environment: Optional[EnvironmentProvider] = None,
        backtrace_limit: Optional[int] = None,
    ) -> None:
        self.configuration = configuration
        self.environment = environment or environment_from_env()
        self.selector = ReporterSelector(configuration)
        self.dispatcher = DeprecationDispatcher(
            configuration,
            self.environment,
            selector=self.selector,
            backtrace_limit=backtrace_limit,
        )
        self.interceptor = MethodInterceptor(self.dispatcher.dispatch)

    def declare_deprecated(self, target: Any, *method_names: str) -> List[WrappedMethod]:
        """Wrap each of ``method_names`` on ``target``.

        Raises:
            ConfigurationError: No method names given, or one cannot be wrapped
        """
        if not method_names:
            raise ConfigurationError(
                "declare_deprecated needs at least one method name",
                field="method_names",
            )
        return [self.interceptor.wrap(target, name) for name in method_names]

    def deprecated_methods(self, *method_names: str) -> Callable[[T], T]:
        """Class decorator declaring ``method_names`` deprecated."""

        def decorator(cls: T) -> T:
            self.declare_deprecated(cls, *method_names)
            return cls

        return decorator

    def check(self, environment: Optional[str] = None) -> Any:
        """Resolve the reporter for ``environment`` (default: current).

        Call at bootstrap to surface a missing mapping before any deprecated
        method runs.

        Raises:
            ConfigurationError: No reporter for the environment
        """
        name = environment if environment is not None else self.environment()
        reporter = self.selector.resolve(name)
        logger.debug("Environment '%s' reports through %s", name, type(reporter).__name__)
        return reporter

    @property
    def declared(self) -> Tuple[WrappedMethod, ...]:
        return tuple(self.interceptor.records)
