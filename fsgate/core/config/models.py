"""Pydantic configuration models for fsgate.

For loading logic, see loader.py.
"""

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str | None = Field(default=None, description="Directory for log files (console only when unset)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class ServerConfig(BaseModel):
    """Identity advertised to MCP clients."""

    name: str = Field(default="read_files_server", description="Server name")
    version: str = Field(default="0.1.0", description="Server version")


class Config(BaseModel):
    """Root configuration for fsgate."""

    allowed_directories: list[str] = Field(
        default_factory=list,
        description="Directories operations may touch; each must exist at startup",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    server: ServerConfig = Field(default_factory=ServerConfig)
