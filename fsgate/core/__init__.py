"""Core functionality for fsgate."""

from fsgate.core.config import Config, load_config
from fsgate.core.errors import (
    AccessDeniedError,
    ConfigError,
    ErrorKind,
    FileIOError,
    GatewayError,
    NotFoundError,
)
from fsgate.core.roots import AllowedRoots, build_allowed_roots, load_allowed_roots

__all__ = [
    "AccessDeniedError",
    "AllowedRoots",
    "Config",
    "ConfigError",
    "ErrorKind",
    "FileIOError",
    "GatewayError",
    "NotFoundError",
    "build_allowed_roots",
    "load_allowed_roots",
    "load_config",
]
