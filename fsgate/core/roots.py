"""Allowed root directories and path containment.

The root set is built once at startup and never mutated afterwards. It is
passed explicitly to the authorizer and the filesystem tools.
"""

import asyncio
import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from fsgate.core.errors import ConfigError

logger = logging.getLogger(__name__)


def expand_home(raw_path: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the current user's home directory.

    ``~user`` forms are left untouched.
    """
    if raw_path == "~" or raw_path.startswith("~/"):
        return str(Path.home()) + raw_path[1:]
    return raw_path


def canonicalize(raw_path: str) -> Path:
    """Return the absolute, normalized form of a path without following symlinks.

    Relative paths are resolved against the process working directory.
    ``.`` and ``..`` segments and trailing separators are collapsed.
    """
    return Path(os.path.abspath(expand_home(raw_path)))


def is_within(candidate: Path, root: Path) -> bool:
    """Return True if ``candidate`` equals ``root`` or lies below it.

    Comparison is on path segments, not string prefixes, so ``/data`` does
    not contain ``/data-public``.
    """
    root_parts = root.parts
    return candidate.parts[: len(root_parts)] == root_parts


@dataclass(frozen=True)
class AllowedRoot:
    """One allowed directory in canonical form plus its filesystem real path."""

    path: Path
    real_path: Path

    def contains(self, candidate: Path) -> bool:
        return is_within(candidate, self.path) or is_within(candidate, self.real_path)


@dataclass(frozen=True)
class AllowedRoots:
    """Immutable, ordered set of directories that operations may touch."""

    roots: tuple[AllowedRoot, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[AllowedRoot]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    @property
    def paths(self) -> tuple[Path, ...]:
        """Canonical root paths in configuration order."""
        return tuple(root.path for root in self.roots)

    def contains(self, candidate: Path) -> bool:
        """Return True if ``candidate`` lies inside at least one root."""
        return any(root.contains(candidate) for root in self.roots)

    def describe(self) -> str:
        return ", ".join(str(p) for p in self.paths)


def _check_directory(raw: str, path: Path) -> AllowedRoot:
    """Verify that ``path`` exists and is a directory.

    Raises:
        ConfigError: If the path is missing, not a directory, or cannot be stat'ed.
    """
    try:
        if not path.is_dir():
            if path.exists():
                raise ConfigError(f"{raw} is not a directory")
            raise ConfigError(f"{raw} does not exist")
        real_path = Path(os.path.realpath(path))
    except OSError as e:
        raise ConfigError(f"Error accessing directory {raw}: {e}") from e
    return AllowedRoot(path=path, real_path=real_path)


async def build_allowed_roots(directories: Sequence[str]) -> AllowedRoots:
    """Canonicalize and validate the configured directories.

    All directories are checked concurrently; every failure is reported in a
    single error so the operator sees the complete list at once.

    Args:
        directories: Raw directory strings from the command line or config file.

    Returns:
        The immutable root set.

    Raises:
        ConfigError: If the list is empty or any entry is invalid.
    """
    if not directories:
        raise ConfigError("At least one allowed directory is required")

    canonical: dict[Path, str] = {}
    for raw in directories:
        canonical.setdefault(canonicalize(raw), raw)

    results = await asyncio.gather(
        *(asyncio.to_thread(_check_directory, raw, path) for path, raw in canonical.items()),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        if not isinstance(failure, ConfigError):
            raise failure
    if failures:
        raise ConfigError("; ".join(str(f) for f in failures))

    roots = AllowedRoots(roots=tuple(r for r in results if isinstance(r, AllowedRoot)))
    logger.debug(f"Allowed directories: {roots.describe()}")
    return roots


def load_allowed_roots(directories: Sequence[str]) -> AllowedRoots:
    """Synchronous wrapper around :func:`build_allowed_roots`."""
    return asyncio.run(build_allowed_roots(directories))
