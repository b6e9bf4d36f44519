"""Configuration doctor for deprecation reporting.

Usage:
    python -m deprecations deprecations.yaml
    python -m deprecations deprecations.yaml --environment production
    python -m deprecations deprecations.yaml --all

Exit codes:
    0 - Configuration is valid and every checked environment has a reporter
    1 - Configuration is invalid or an environment has no reporter
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from deprecations.lib.config import Configuration
from deprecations.lib.config_loader import load_configuration
from deprecations.lib.deprecator import Deprecations
from deprecations.lib.env import environment_from_env
from deprecations.lib.errors import ConfigurationError
from deprecations.lib.logging import setup_logging
from deprecations.lib.reporters import describe_reporter


def _environments_to_check(
    configuration: Configuration,
    requested: Optional[List[str]],
    check_all: bool,
) -> List[str]:
    if check_all:
        return sorted(configuration.environment_reporters)
    if requested:
        return requested
    return [environment_from_env()()]


def run_doctor(
    config_path: str,
    environments: Optional[List[str]] = None,
    check_all: bool = False,
    env_file: Optional[str] = None,
) -> int:
    """Validate a configuration file and print the reporter per environment.

    Returns:
        Process exit code
    """
    print()
    print("=" * 60)
    print("DEPRECATION REPORTING CHECK")
    print("=" * 60)
    print(f"Config: {config_path}")
    print()

    try:
        configuration = load_configuration(config_path, env_file=env_file)
    except ConfigurationError as exc:
        print("Configuration: INVALID")
        print(f"  {exc}")
        print()
        print("RESULT: FAILED - Fix errors above before deploying")
        return 1

    print("Configuration: OK")
    print(f"  Debug backtraces: {'on' if configuration.debug_enabled else 'off'}")
    print(f"  Referral contact: {configuration.referral_contact}")
    if configuration.fallback_reporter is not None:
        print(f"  Fallback:         {describe_reporter(configuration.fallback_reporter)}")
    print()

    deprecations = Deprecations(configuration)
    failed = False
    for environment in _environments_to_check(configuration, environments, check_all):
        print(f"  {environment}: ", end="")
        try:
            reporter = deprecations.check(environment)
        except ConfigurationError as exc:
            failed = True
            print("MISSING")
            print(f"    {exc.message}")
            continue
        print(describe_reporter(reporter))

    print()
    print("=" * 60)
    if failed:
        print("RESULT: FAILED - Fix errors above before deploying")
        return 1
    print("RESULT: PASSED")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Validate a deprecation reporting configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Check the environment named by DEPRECATIONS_ENV / APP_ENV / ENV
    python -m deprecations deprecations.yaml

    # Check specific environments
    python -m deprecations deprecations.yaml -e production -e staging

    # Check every configured environment
    python -m deprecations deprecations.yaml --all
        """,
    )
    parser.add_argument("config", help="Path to the YAML configuration file")
    parser.add_argument(
        "--environment",
        "-e",
        action="append",
        dest="environments",
        help="Environment to check (repeatable)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        dest="check_all",
        help="Check every environment in the configuration",
    )
    parser.add_argument(
        "--env-file",
        help="Load variables from this .env file before expanding ${VAR}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Use JSON log format (for log aggregation)",
    )

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, json_format=args.json_log)

    sys.exit(
        run_doctor(
            args.config,
            environments=args.environments,
            check_all=args.check_all,
            env_file=args.env_file,
        )
    )


if __name__ == "__main__":
    main()
