"""Exceptions raised by zipmount backends and the resolver facade."""

from __future__ import annotations

import errno


class InvalidTargetError(OSError):
    """Path exists but is the wrong kind for the operation.

    Raised when opening a directory or symlink inside an archive, or when
    listing something that is not a directory.
    """

    def __init__(self, message: str, path: str):
        super().__init__(errno.EINVAL, message, path)


class MalformedArchiveError(ValueError):
    """The archive cannot be indexed (unknown member kind, kind conflict)."""


class ResolveError(OSError):
    """Failure reported by ResolverFS.

    Attributes:
        canonical: Error normalized for pattern matching by callers.
        original: The error raised by the backend or while decoding.
    """

    def __init__(self, canonical: OSError, original: Exception):
        if canonical.errno is None:
            super().__init__(str(canonical))
        else:
            super().__init__(canonical.errno, canonical.strerror, canonical.filename)
        self.canonical = canonical
        self.original = original


def canonical_error(err: Exception, path: str | None = None) -> OSError:
    """Map a failure onto the OSError kind a resolver should match on.

    A path running through a regular file reads as absent. Failures that
    are not OSErrors (corrupt archive members, undecodable text) read as
    I/O errors.
    """
    if isinstance(err, NotADirectoryError):
        return FileNotFoundError(
            errno.ENOENT, "No such file or directory", err.filename
        )
    if isinstance(err, OSError):
        return err
    return OSError(errno.EIO, str(err), path)
