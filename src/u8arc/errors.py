"""
errors.py — Exceptions raised while packing a U8 archive.

Every failure aborts the whole pack; callers catch ArcError to report it.
OSErrors are translated where they happen and chained as __cause__.
"""

from __future__ import annotations

import errno
from pathlib import Path


class ArcError(Exception):
    """Base class for packer failures. ``path`` is the file involved, if any."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class PathNotFound(ArcError):
    """Source directory (or a source file) does not exist."""


class AccessDenied(ArcError):
    """Permission denied reading a source or writing the archive."""


class IOFailure(ArcError):
    """Any other read/write/seek error."""


class EncodingFailure(ArcError):
    """A file or directory name cannot be stored as UTF-8."""


class LayoutOverflow(ArcError):
    """A value does not fit the width of its on-disk field."""


def from_os_error(exc: OSError, path: Path | str, action: str) -> ArcError:
    """Map an OSError to the matching ArcError subclass (not raised here)."""
    reason = exc.strerror or str(exc)
    message = f"Cannot {action} {path}: {reason}"
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)) or exc.errno in (
        errno.ENOENT, errno.ENOTDIR,
    ):
        return PathNotFound(message, path)
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return AccessDenied(message, path)
    return IOFailure(message, path)
