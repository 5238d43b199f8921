"""Error taxonomy for gateway operations.

Only ``ConfigError`` is fatal, and only at startup. Everything else is caught
at the operation boundary and returned to the caller as a structured result.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category reported alongside every failed operation."""

    CONFIG = "config"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    IO = "io"
    INVALID_ARGUMENTS = "invalid_arguments"
    INTERNAL = "internal"


class GatewayError(Exception):
    """Base class for all gateway failures."""

    kind: ErrorKind = ErrorKind.INTERNAL


class ConfigError(GatewayError):
    """An allowed directory is missing, not a directory, or inaccessible."""

    kind = ErrorKind.CONFIG


class AccessDeniedError(GatewayError):
    """Path, symlink target, or parent directory lies outside every allowed root."""

    kind = ErrorKind.ACCESS_DENIED


class NotFoundError(GatewayError):
    """Target file does not exist."""

    kind = ErrorKind.NOT_FOUND


class FileIOError(GatewayError):
    """Any other filesystem failure (permission, disk, encoding)."""

    kind = ErrorKind.IO
