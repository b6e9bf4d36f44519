"""Environment utilities.

Provides expansion of ${VAR_NAME} patterns in configuration values,
loading of .env files, and environment-indicator providers.

Uses python-dotenv for .env file loading.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, Union

from dotenv import load_dotenv

__all__ = [
    "EnvironmentProvider",
    "DEFAULT_ENVIRONMENT_VARS",
    "environment_from_env",
    "expand_env_vars",
    "expand_options",
    "load_env_file",
    "static_environment",
]

# Zero-argument callable returning the current environment name
EnvironmentProvider = Callable[[], str]

DEFAULT_ENVIRONMENT_VARS = ("DEPRECATIONS_ENV", "APP_ENV", "ENV")

# Pattern for ${VAR_NAME} or $VAR_NAME
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def static_environment(name: str) -> EnvironmentProvider:
    """Return a provider that always reports ``name``."""

    def provider() -> str:
        return name

    return provider


def environment_from_env(
    var_names: Sequence[str] = DEFAULT_ENVIRONMENT_VARS,
    default: str = "development",
) -> EnvironmentProvider:
    """Return a provider reading the environment name from env variables.

    The first non-empty variable in ``var_names`` wins. Variables are read
    on every call, so the provider follows changes made after start-up.

    Example:
        >>> os.environ["APP_ENV"] = "production"
        >>> environment_from_env()()
        'production'
    """
    names = tuple(var_names)

    def provider() -> str:
        for name in names:
            value = os.environ.get(name, "").strip()
            if value:
                return value.lower()
        return default

    return provider


def load_env_file(
    path: Optional[Union[str, Path]] = None,
    *,
    override: bool = False,
) -> bool:
    """Load environment variables from a .env file.

    Args:
        path: Path to .env file. If None, searches for .env in current
              directory and parent directories.
        override: If True, override existing environment variables.

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    return load_dotenv(dotenv_path=path, override=override)


def expand_env_vars(value: str, *, strict: bool = False) -> str:
    """Expand environment variables in a string.

    Supports both ${VAR_NAME} and $VAR_NAME syntax.

    Args:
        value: String potentially containing env var references
        strict: If True, raise KeyError for missing variables

    Returns:
        String with environment variables expanded

    Example:
        >>> os.environ["TRACKER_HOST"] = "tracker.example.com"
        >>> expand_env_vars("https://${TRACKER_HOST}/api")
        'https://tracker.example.com/api'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1) or match.group(2)
        env_value = os.environ.get(var_name)
        if env_value is None:
            if strict:
                raise KeyError(f"Environment variable not set: {var_name}")
            return str(match.group(0))
        return env_value

    return ENV_VAR_PATTERN.sub(replacer, value)


def expand_options(options: Dict[str, Any], *, strict: bool = False) -> Dict[str, Any]:
    """Recursively expand environment variables in an options dict.

    Args:
        options: Dictionary of options
        strict: If True, raise KeyError for missing variables

    Returns:
        New dictionary with env vars expanded in string values
    """
    result: Dict[str, Any] = {}

    for key, value in options.items():
        result[key] = _expand_value(value, strict=strict)

    return result


def _expand_value(value: Any, *, strict: bool) -> Any:
    if isinstance(value, str):
        return expand_env_vars(value, strict=strict)
    if isinstance(value, dict):
        return expand_options(value, strict=strict)
    if isinstance(value, list):
        return [_expand_value(item, strict=strict) for item in value]
    return value
