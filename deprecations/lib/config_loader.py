"""YAML configuration loader for deprecation reporting.

Example YAML (deprecations.yaml):
    debug: false
    referral_contact: "the migration guide"
    reporters:
      development:
        type: log
      test:
        type: "null"
      production:
        type: composite
        reporters:
          - type: log
          - type: remote
            endpoint: "${TRACKER_URL}"
            api_key: "${TRACKER_API_KEY}"
            timeout: 2
    fallback:
      type: log

Usage:
    from deprecations.lib.config_loader import load_configuration
    configuration = load_configuration("./deprecations.yaml")
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from deprecations.lib.config import (
    DEFAULT_MESSAGE_TEMPLATE,
    DEFAULT_REFERRAL_CONTACT,
    Configuration,
)
from deprecations.lib.env import expand_options, load_env_file
from deprecations.lib.errors import ConfigurationError
from deprecations.lib.reporters import (
    CompositeReporter,
    LogReporter,
    NullReporter,
    RemoteTrackerReporter,
)
from deprecations.lib.resilience import CircuitBreaker
from deprecations.lib.tracker import DEFAULT_TRACKER_TIMEOUT, HttpTrackerClient

logger = logging.getLogger(__name__)

__all__ = [
    "load_configuration",
    "load_configuration_from_dict",
    "build_reporter",
    "REPORTER_TYPES",
]

ReporterFactory = Callable[[Dict[str, Any], str], Any]

LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_TOP_LEVEL_KEYS = {"debug", "referral_contact", "message_template", "reporters", "fallback"}

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _parse_bool(value: Any, field: str) -> bool:
    """Interpret a YAML flag, including strings produced by ${VAR} expansion."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigurationError(
        f"{field} must be true or false",
        field=field,
        value=value,
        suggestion="Use one of: true, false, yes, no, on, off, 1, 0.",
    )


def _number(
    options: Dict[str, Any],
    key: str,
    default: Any,
    cast: Callable[[Any], Any],
    field: str,
) -> Any:
    value = options.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Remote reporter {key} must be a number",
            field=f"{field}.{key}",
            value=value,
        ) from None


def _build_log_reporter(options: Dict[str, Any], field: str) -> LogReporter:
    level_name = str(options.get("level", "warning")).lower()
    if level_name not in LOG_LEVEL_MAP:
        valid = ", ".join(LOG_LEVEL_MAP)
        raise ConfigurationError(
            f"Invalid log level '{options.get('level')}'. Valid options: {valid}",
            field=f"{field}.level",
            value=options.get("level"),
        )
    logger_name = options.get("logger")
    return LogReporter(
        logger=logging.getLogger(logger_name) if logger_name else None,
        level=LOG_LEVEL_MAP[level_name],
    )


def _build_remote_reporter(options: Dict[str, Any], field: str) -> RemoteTrackerReporter:
    endpoint = options.get("endpoint")
    if not endpoint:
        raise ConfigurationError(
            "Remote reporter requires an endpoint",
            field=f"{field}.endpoint",
        )
    if "$" in str(endpoint):
        raise ConfigurationError(
            f"Remote reporter endpoint references an unset variable: {endpoint}",
            field=f"{field}.endpoint",
            value=endpoint,
            suggestion="Export the variable or add it to your .env file.",
        )

    timeout = _number(options, "timeout", DEFAULT_TRACKER_TIMEOUT, float, field)

    breaker = None
    if "failure_threshold" in options:
        breaker = CircuitBreaker(
            failure_threshold=_number(options, "failure_threshold", None, int, field),
            recovery_time=_number(options, "recovery_time", 60.0, float, field),
        )

    api_key = options.get("api_key") or None
    if api_key is not None and "$" in str(api_key):
        logger.warning("%s.api_key references an unset variable; sending without it", field)
        api_key = None

    client = HttpTrackerClient(
        str(endpoint),
        api_key=api_key,
        timeout=timeout,
        environment=options.get("environment"),
    )
    return RemoteTrackerReporter(
        client,
        level=str(options.get("level", "warning")),
        breaker=breaker,
    )


def _build_null_reporter(options: Dict[str, Any], field: str) -> NullReporter:
    return NullReporter()


def _build_composite_reporter(options: Dict[str, Any], field: str) -> CompositeReporter:
    members = options.get("reporters")
    if not isinstance(members, list) or not members:
        raise ConfigurationError(
            "Composite reporter requires a non-empty 'reporters' list",
            field=f"{field}.reporters",
        )
    return CompositeReporter(
        build_reporter(member, field=f"{field}.reporters[{index}]")
        for index, member in enumerate(members)
    )


REPORTER_TYPES: Dict[str, ReporterFactory] = {
    "log": _build_log_reporter,
    "remote": _build_remote_reporter,
    "null": _build_null_reporter,
    "none": _build_null_reporter,
    "composite": _build_composite_reporter,
}


def _import_reporter_class(path: str, field: str) -> Any:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        valid = ", ".join(sorted(REPORTER_TYPES))
        raise ConfigurationError(
            f"Invalid reporter type '{path}'. Valid options: {valid}, "
            "or an import path like 'package.module:ClassName'",
            field=f"{field}.type",
            value=path,
        )
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(
            f"Cannot import reporter '{path}': {exc}",
            field=f"{field}.type",
            value=path,
        ) from exc


def build_reporter(config: Any, *, field: str = "reporter") -> Any:
    """Create a reporter from its YAML mapping.

    Args:
        config: Mapping with a ``type`` key and type-specific options
        field: Config path used in error messages

    Raises:
        ConfigurationError: If the mapping is invalid
    """
    if isinstance(config, str):
        config = {"type": config}
    if config is None:
        # YAML parses a bare `null` type as None
        config = {"type": "null"}
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            f"{field} must be a mapping with a 'type' key",
            field=field,
            value=config,
        )

    options = dict(config)
    reporter_type = options.pop("type", None)
    if reporter_type is None:
        if "type" in config:
            reporter_type = "null"
        else:
            raise ConfigurationError(f"{field}.type is required", field=f"{field}.type")

    type_name = str(reporter_type).lower()
    factory = REPORTER_TYPES.get(type_name)
    if factory is not None:
        return factory(options, field)

    reporter_cls = _import_reporter_class(str(reporter_type), field)
    try:
        return reporter_cls(**options)
    except TypeError as exc:
        raise ConfigurationError(
            f"Cannot construct reporter '{reporter_type}': {exc}",
            field=field,
            value=reporter_type,
        ) from exc


def load_configuration_from_dict(config: Mapping[str, Any]) -> Configuration:
    """Build a Configuration from a parsed YAML mapping.

    String values are expanded for ${VAR} references before use.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            "Configuration must be a mapping",
            value=type(config).__name__,
        )

    unknown = set(config) - _TOP_LEVEL_KEYS
    for key in sorted(unknown):
        logger.warning("Ignoring unknown configuration key '%s'", key)

    expanded = expand_options(dict(config))

    reporters_cfg = expanded.get("reporters") or {}
    if not isinstance(reporters_cfg, Mapping):
        raise ConfigurationError(
            "reporters must map environment names to reporter definitions",
            field="reporters",
        )

    reporters = {
        str(environment): build_reporter(definition, field=f"reporters.{environment}")
        for environment, definition in reporters_cfg.items()
    }

    fallback = None
    if expanded.get("fallback") is not None:
        fallback = build_reporter(expanded["fallback"], field="fallback")

    if not reporters and fallback is None:
        raise ConfigurationError(
            "No reporters configured",
            field="reporters",
            suggestion="Map at least one environment to a reporter or set a fallback.",
        )

    return Configuration(
        debug_enabled=_parse_bool(expanded.get("debug", False), "debug"),
        referral_contact=str(expanded.get("referral_contact") or DEFAULT_REFERRAL_CONTACT),
        environment_reporters=reporters,
        fallback_reporter=fallback,
        message_template=str(expanded.get("message_template") or DEFAULT_MESSAGE_TEMPLATE),
    )


def load_configuration(
    path: Union[str, Path],
    *,
    env_file: Optional[Union[str, Path]] = None,
) -> Configuration:
    """Load a Configuration from a YAML file.

    Args:
        path: Path to the YAML file
        env_file: Optional .env file loaded before ${VAR} expansion

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            field="path",
            value=str(config_path),
        )

    if env_file is not None:
        load_env_file(env_file)

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Invalid YAML in {config_path}: {exc}",
            field="path",
            value=str(config_path),
        ) from exc

    if data is None:
        raise ConfigurationError(
            f"Configuration file is empty: {config_path}",
            field="path",
            value=str(config_path),
        )

    logger.debug("Loaded deprecation configuration from %s", config_path)
    return load_configuration_from_dict(data)
