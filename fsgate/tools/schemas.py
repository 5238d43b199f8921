"""Argument and result models for the gateway operations."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from fsgate.core.errors import ErrorKind


class ReadFileLinesArgs(BaseModel):
    """Arguments for read_file_lines."""

    path: str = Field(description="Path to the file to read")
    offset: int = Field(ge=0, description="The starting line number (0-indexed).")
    limit: int = Field(ge=1, description="The maximum number of lines to read.")

    model_config = {"extra": "forbid"}


class AppendFileArgs(BaseModel):
    """Arguments for append_file."""

    path: str = Field(description="Path to the file to append to")
    content: str = Field(description="Text appended verbatim; no separator is added")

    model_config = {"extra": "forbid"}


@dataclass(frozen=True)
class OperationResult:
    """Structured outcome of a single operation.

    Exactly one of ``content``/``message`` (success) or ``error`` (failure) is set.
    """

    success: bool
    content: str | None = None
    message: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def with_content(cls, content: str) -> "OperationResult":
        return cls(success=True, content=content)

    @classmethod
    def with_message(cls, message: str) -> "OperationResult":
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind) -> "OperationResult":
        return cls(success=False, error=error, error_kind=kind)

    @property
    def is_error(self) -> bool:
        return not self.success

    @property
    def text(self) -> str:
        """Single text payload for transports that carry one string."""
        if self.error is not None:
            return self.error
        if self.content is not None:
            return self.content
        return self.message or ""

    def to_dict(self) -> dict[str, Any]:
        if self.is_error:
            return {"error": self.error}
        if self.content is not None:
            return {"content": self.content}
        return {"success": True, "message": self.message}
