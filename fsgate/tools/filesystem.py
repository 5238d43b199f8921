"""Sandboxed filesystem operations.

Provides the two gateway operations, bounded line-range read and append,
restricted to the configured allowed roots. Each request authorizes its path
and performs its I/O as one unit on a worker thread.
"""

import asyncio
import logging
import os
import re
from pathlib import Path

from langchain_core.tools import BaseTool, tool

from fsgate.core.errors import FileIOError, GatewayError, NotFoundError
from fsgate.core.roots import AllowedRoots
from fsgate.tools.sandbox import require_authorized
from fsgate.tools.schemas import OperationResult

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
_NOFOLLOW = getattr(os, "O_NOFOLLOW", 0)


def _open_nofollow(path: str, flags: int) -> int:
    """Opener that refuses to follow a symlink in the final path component."""
    return os.open(path, flags | _NOFOLLOW, 0o644)


def read_lines(path: Path, offset: int, limit: int) -> str:
    """Return up to ``limit`` lines of ``path`` starting at line ``offset``.

    The whole file is loaded into memory. Lines are split on ``\\n`` and
    ``\\r\\n`` and rejoined with ``\\n``. An offset at or past the end of the
    file yields an empty string.

    Raises:
        NotFoundError: If the file does not exist.
        FileIOError: For any other read or decoding failure.
    """
    if offset < 0 or limit < 1:
        raise ValueError(f"Invalid line window: offset={offset}, limit={limit}")

    try:
        with open(path, "r", encoding="utf-8", newline="", opener=_open_nofollow) as f:
            content = f.read()
    except FileNotFoundError:
        raise NotFoundError("File not found.") from None
    except (OSError, UnicodeDecodeError) as e:
        raise FileIOError(str(e)) from e

    lines = _LINE_BREAK.split(content)
    return "\n".join(lines[offset : offset + limit])


def append_text(path: Path, content: str) -> None:
    """Append ``content`` verbatim to ``path``, creating the file if absent.

    Content that cannot be encoded as UTF-8 is rejected before the file is touched.

    Raises:
        FileIOError: If the content cannot be encoded or the file cannot be opened or written.
    """
    try:
        data = content.encode("utf-8")
        with open(path, "ab", opener=_open_nofollow) as f:
            f.write(data)
    except (OSError, UnicodeEncodeError) as e:
        raise FileIOError(str(e)) from e


class FilesystemTools:
    """Root-confined filesystem operations.

    Every path is authorized against the allowed roots before any I/O. Failures
    are returned as ``OperationResult`` values rather than raised.
    """

    def __init__(self, roots: AllowedRoots):
        """Initialize filesystem tools.

        Args:
            roots: Allowed directories, validated at startup.
        """
        self.roots = roots

    async def read_file_lines(self, path: str, offset: int, limit: int) -> OperationResult:
        """Read a window of lines from a file inside the allowed roots."""
        try:
            content = await asyncio.to_thread(self._read_file_lines, path, offset, limit)
        except GatewayError as e:
            return OperationResult.failure(str(e), e.kind)
        return OperationResult.with_content(content)

    async def append_file(self, path: str, content: str) -> OperationResult:
        """Append text to a file inside the allowed roots, creating it if needed."""
        try:
            await asyncio.to_thread(self._append_file, path, content)
        except GatewayError as e:
            return OperationResult.failure(str(e), e.kind)
        return OperationResult.with_message(f"Successfully appended to {path}")

    def _read_file_lines(self, path: str, offset: int, limit: int) -> str:
        resolved_path = require_authorized(path, self.roots)
        logger.debug(f"Reading lines {offset}..{offset + limit} of {resolved_path}")
        return read_lines(resolved_path, offset, limit)

    def _append_file(self, path: str, content: str) -> None:
        resolved_path = require_authorized(path, self.roots)
        logger.debug(f"Appending {len(content)} chars to {resolved_path}")
        append_text(resolved_path, content)

    def get_tools(self) -> list[BaseTool]:
        """Return the operations as LangChain tools bound to this root set."""

        @tool
        async def read_file_lines(path: str, offset: int = 0, limit: int = 100) -> str:
            """Read a number of lines from a file, given a path, line offset, and line limit.

            Only works within allowed directories.

            Args:
                path: Path to the file
                offset: Line offset to start reading from (0-indexed, default: 0)
                limit: Maximum number of lines to read (default: 100)

            Returns:
                The selected lines, or an error message
            """
            if offset < 0 or limit < 1:
                return "Error: offset must be >= 0 and limit must be >= 1"
            result = await self.read_file_lines(path, offset, limit)
            return f"Error: {result.error}" if result.is_error else result.text

        @tool
        async def append_file(path: str, content: str) -> str:
            """Append content to a file. If the file does not exist, it will be created.

            Only works within allowed directories. No newline is added between appends.

            Args:
                path: Path to the file
                content: Text to append

            Returns:
                Success message or error
            """
            result = await self.append_file(path, content)
            return f"Error: {result.error}" if result.is_error else result.text

        return [read_file_lines, append_file]
