"""Sandbox path authorization for root-confined file operations."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fsgate.core.errors import AccessDeniedError
from fsgate.core.roots import AllowedRoots, canonicalize

logger = logging.getLogger(__name__)


class DenialReason(str, Enum):
    """Why a path was refused."""

    OUTSIDE_ALLOWED = "outside allowed directories"
    SYMLINK_OUTSIDE = "symlink target outside allowed directories"
    PARENT_OUTSIDE = "parent directory outside allowed directories"
    PARENT_MISSING = "parent directory does not exist"
    INVALID_PATH = "path contains a null byte"


@dataclass(frozen=True)
class Authorized:
    """The path an operation may act on."""

    path: Path


@dataclass(frozen=True)
class Denied:
    """A refused path and the reason for refusing it."""

    reason: DenialReason
    path: Path

    @property
    def message(self) -> str:
        return f"Access denied - {self.reason.value}: {self.path}"

    def to_error(self) -> AccessDeniedError:
        return AccessDeniedError(self.message)


ValidationOutcome = Authorized | Denied


def authorize_path(raw_path: str, roots: AllowedRoots) -> ValidationOutcome:
    """Decide whether a caller-supplied path may be touched.

    Steps, in order:

    1. Canonicalize: expand ``~``, make absolute against the working
       directory, collapse ``.``/``..``. No symlinks are followed yet.
    2. The canonical path must lie inside an allowed root.
    3. If the target exists, follow every symlink and check the real path
       again. A link inside a root that points outside it is refused.
    4. If the target cannot be resolved (it does not exist yet), a dangling
       symlink must still point inside a root, and the parent directory must
       resolve to a real path inside a root. The canonical path is returned
       because the file has no real path yet; for a dangling link inside a
       root it is the link target, so the file can be created there.

    Performs metadata lookups only. Holds no state, so it is safe to call
    concurrently.

    Args:
        raw_path: Absolute, relative, or home-relative path string.
        roots: The configured allowed directories.

    Returns:
        ``Authorized`` with the path to operate on, or ``Denied`` with a reason.
    """
    if "\x00" in raw_path:
        return _deny(DenialReason.INVALID_PATH, Path(raw_path.replace("\x00", "\\x00")))

    canonical = canonicalize(raw_path)

    if not roots.contains(canonical):
        return _deny(DenialReason.OUTSIDE_ALLOWED, canonical)

    try:
        real_path = Path(os.path.realpath(canonical, strict=True))
    except (OSError, ValueError):
        return _authorize_new_file(canonical, roots)

    if not roots.contains(real_path):
        return _deny(DenialReason.SYMLINK_OUTSIDE, canonical)

    return Authorized(real_path)


def _authorize_new_file(canonical: Path, roots: AllowedRoots) -> ValidationOutcome:
    """Fallback for targets that do not resolve, typically files about to be created."""
    if canonical.is_symlink():
        # Dangling link: the file would be created at its target, so judge that.
        target = Path(os.path.realpath(canonical))
        if not roots.contains(target):
            return _deny(DenialReason.SYMLINK_OUTSIDE, canonical)
        canonical = target

    parent = canonical.parent
    try:
        real_parent = Path(os.path.realpath(parent, strict=True))
    except (OSError, ValueError):
        return _deny(DenialReason.PARENT_MISSING, parent)

    if not roots.contains(real_parent):
        return _deny(DenialReason.PARENT_OUTSIDE, canonical)

    return Authorized(canonical)


def _deny(reason: DenialReason, path: Path) -> Denied:
    logger.warning(f"Access denied ({reason.value}): {path}")
    return Denied(reason=reason, path=path)


def require_authorized(raw_path: str, roots: AllowedRoots) -> Path:
    """Authorize ``raw_path`` or raise.

    Raises:
        AccessDeniedError: If the path is refused for any reason.
    """
    outcome = authorize_path(raw_path, roots)
    if isinstance(outcome, Denied):
        raise outcome.to_error()
    return outcome.path
