"""Resolver-facing filesystem facade.

ResolverFS wraps any FileSystem backend and offers what a module resolver
needs: directory snapshots with lazily classified entries, whole-file
reads, modification keys for cache invalidation and path helpers.
"""

from __future__ import annotations

import enum
import io
import os
import shutil
import zipfile
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .base import FileSystem
from .errors import ResolveError, canonical_error


class EntryKind(enum.Enum):
    MISSING = 0
    DIR = 1
    FILE = 2


@dataclass(frozen=True)
class ModKey:
    """Fingerprint of a file used as an equality-only cache key."""

    size: int
    mode: int
    mtime_sec: int
    mtime_nsec: int


@dataclass(frozen=True)
class DirEntry:
    """A directory child that has not been stat'd yet."""

    dir: str
    base: str

    @property
    def need_stat(self) -> bool:
        return True


@dataclass(frozen=True)
class ClassifiedEntry:
    """A directory child after its kind has been looked up."""

    dir: str
    base: str
    kind: EntryKind

    @property
    def need_stat(self) -> bool:
        return False


@dataclass(frozen=True)
class DirEntries:
    """Snapshot of one directory listing.

    Keys are case-folded base names, so children differing only in case
    collapse into one entry.
    """

    dir: str
    data: Mapping[str, DirEntry]

    def get(self, name: str) -> DirEntry | None:
        return self.data.get(name.casefold())

    def sorted_keys(self) -> list[str]:
        return sorted(self.data)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class WatchData:
    """Paths to watch for changes. Always empty: watching is not supported."""

    paths: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class ResolverFS:
    """Path resolution and whole-file access on top of a FileSystem backend.

    The working directory is captured from the backend once, at
    construction; relative paths are always resolved against it.

    Example:
        >>> fs = ResolverFS(ZipFS("deps.zip", "/proj/node_modules", cwd="/proj"))
        >>> fs.read_file("node_modules/left-pad/index.js")
        'module.exports = ...'
    """

    def __init__(self, backend: FileSystem):
        self.backend = backend
        self._cwd = backend.getcwd()

    def to_absolute(self, path: str) -> str:
        if self.is_absolute(path):
            return path
        return self.join(self._cwd, path)

    def read_directory(self, dir: str) -> DirEntries:
        """List a directory into a DirEntries snapshot.

        Raises:
            ResolveError: Carrying the canonical and the backend error.
        """
        dir = self.to_absolute(dir)
        try:
            names = self.backend.listdir(dir)
        except OSError as e:
            raise ResolveError(canonical_error(e), e) from e

        data = {name.casefold(): DirEntry(dir=dir, base=name) for name in names}
        return DirEntries(dir=dir, data=MappingProxyType(data))

    def read_file(self, path: str) -> str:
        """Read a whole file as UTF-8 text.

        The stream is closed before decoding, whatever the outcome.

        Raises:
            ResolveError: Carrying the canonical and the original error,
                including corrupt archive members and invalid UTF-8.
        """
        path = self.to_absolute(path)
        buf = io.BytesIO()
        try:
            with self.backend.open(path) as f:
                shutil.copyfileobj(f, buf)
        except (OSError, zipfile.BadZipFile) as e:
            raise ResolveError(canonical_error(e, path), e) from e
        try:
            return buf.getvalue().decode("utf-8")
        except UnicodeDecodeError as e:
            raise ResolveError(canonical_error(e, path), e) from e

    def modification_key(self, path: str) -> ModKey:
        path = self.to_absolute(path)
        st = self.backend.stat(path)
        return ModKey(
            size=st.size,
            mode=st.mode,
            mtime_sec=st.mtime_sec,
            mtime_nsec=st.mtime_nsec,
        )

    def classify(self, entry: DirEntry) -> ClassifiedEntry:
        """Stat a lazily listed entry. Entries that fail to stat are MISSING."""
        path = self.join(self.to_absolute(entry.dir), entry.base)
        try:
            st = self.backend.stat(path)
        except OSError:
            kind = EntryKind.MISSING
        else:
            kind = EntryKind.DIR if st.is_dir else EntryKind.FILE
        return ClassifiedEntry(dir=entry.dir, base=entry.base, kind=kind)

    def open_file(self, path: str) -> Any:
        raise NotImplementedError("ResolverFS does not support streamed open_file()")

    def watch_data(self) -> WatchData:
        return WatchData()

    # -------------------------------------------------------------------------
    # Path helpers
    # -------------------------------------------------------------------------

    def cwd(self) -> str:
        return self._cwd

    def is_absolute(self, path: str) -> bool:
        return os.path.isabs(path)

    def absolute(self, path: str) -> str:
        return os.path.normpath(self.to_absolute(path))

    def directory_of(self, path: str) -> str:
        return os.path.dirname(path) or "."

    def base_name(self, path: str) -> str:
        stripped = path.rstrip(os.sep)
        if not stripped:
            return os.sep if path else "."
        return os.path.basename(stripped)

    def extension(self, path: str) -> str:
        return os.path.splitext(path)[1]

    def join(self, *parts: str) -> str:
        return os.path.normpath(os.path.join(*parts))

    def relative_to(self, base: str, target: str) -> str | None:
        """Relative path from base to target, or None if there is none."""
        try:
            return os.path.relpath(self.to_absolute(target), self.to_absolute(base))
        except ValueError:
            return None
