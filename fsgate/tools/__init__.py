"""Sandboxed filesystem tools.

Provides:
- FilesystemTools: read_file_lines and append_file, confined to the allowed roots
- authorize_path: path authorization against the allowed roots
"""

from fsgate.tools.filesystem import FilesystemTools, append_text, read_lines
from fsgate.tools.sandbox import Authorized, Denied, DenialReason, authorize_path
from fsgate.tools.schemas import AppendFileArgs, OperationResult, ReadFileLinesArgs

__all__ = [
    "AppendFileArgs",
    "Authorized",
    "Denied",
    "DenialReason",
    "FilesystemTools",
    "OperationResult",
    "ReadFileLinesArgs",
    "append_text",
    "authorize_path",
    "read_lines",
]
