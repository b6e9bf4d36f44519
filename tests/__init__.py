"""deprecation-sentinel test suite.

Test organization:
- unit/test_deprecation_interceptor.py: method wrapping and declaration
- unit/test_deprecation_dispatcher.py: message building, backtraces, failure isolation
- unit/test_reporters.py, unit/test_tracker.py: reporting backends
- unit/test_config_loader.py, unit/test_env.py: YAML and environment configuration
"""
