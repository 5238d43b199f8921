"""Configuration package for fsgate.

This package provides Pydantic configuration models and loading utilities.
"""

from fsgate.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
)
from fsgate.core.config.models import Config, LoggingConfig, ServerConfig

__all__ = [
    # Models
    "Config",
    "LoggingConfig",
    "ServerConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
]
