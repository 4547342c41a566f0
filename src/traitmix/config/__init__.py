"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .runtime import RuntimeConfig, get_description_path, get_runtime_config

__all__ = [
    "ConfigurationError",
    "MissingConfigurationError",
    "RuntimeConfig",
    "configure_logging",
    "get_description_path",
    "get_runtime_config",
    "optional_env_var",
    "require_env_vars",
]
