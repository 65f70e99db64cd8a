"""Zip-backed filesystem mounted over the real filesystem.

Paths at or below the mount root are served from a zip archive; all other
paths are passed to a fallback backend (the real filesystem by default).
"""

from __future__ import annotations

import calendar
import errno
import logging
import os
import stat as stat_mod
import zipfile
from collections.abc import Mapping
from types import MappingProxyType
from typing import BinaryIO

from .archive import ArchiveEntry, MemberKind, build_index, member_mode
from .base import FileStat, FileSystem
from .errors import InvalidTargetError, MalformedArchiveError
from .paths import is_rooted, strip_root
from .realfs import RealFS


class ZipFS:
    """FileSystem interface exposing a zip subtree at a mount root.

    The archive is indexed once at construction and never changes
    afterwards, so concurrent reads are safe. Each open() returns an
    independent stream.

    The parent directory of the mount root lists the mount root's base
    name even when nothing exists there on disk, so a directory walk
    finds the archive without special handling.

    Example:
        >>> zfs = ZipFS("deps.zip", "/proj/node_modules", "node_modules/", cwd="/proj")
        >>> zfs.listdir("/proj/node_modules/react")
        ['index.js', 'package.json', 'cjs']
    """

    def __init__(
        self,
        archive: str,
        mount_root: str,
        archive_root: str = "",
        cwd: str | None = None,
        fallback: FileSystem | None = None,
        log: logging.Logger | None = None,
    ):
        """Open and index the archive.

        Args:
            archive: Path of the zip file on the real filesystem.
            mount_root: Absolute path where the in-archive root appears.
            archive_root: Subtree of the archive exposed at mount_root.
            cwd: Working directory reported by getcwd(). Defaults to the
                process working directory.
            fallback: Backend for paths outside mount_root. Defaults to RealFS.
            log: Diagnostic sink.

        Raises:
            ValueError: If mount_root is not absolute.
            MalformedArchiveError: If the archive cannot be indexed.
            FileNotFoundError: If the archive does not exist.
        """
        if not os.path.isabs(mount_root):
            raise ValueError(f"Mount root must be absolute path: {mount_root}")

        self._log = log or logging.getLogger(__name__)
        self._cwd = cwd if cwd is not None else os.getcwd()
        self._fallback = fallback if fallback is not None else RealFS(self._cwd)

        self.archive_path = archive
        self.mount_root = os.path.normpath(mount_root)
        self._mount_parent = os.path.dirname(self.mount_root)
        self._mount_name = os.path.basename(self.mount_root)

        try:
            self._zip = zipfile.ZipFile(archive, "r")
        except zipfile.BadZipFile as e:
            raise MalformedArchiveError(f"Cannot open zip file {archive}: {e}") from e
        try:
            self._entries = build_index(self._zip, archive_root, log=self._log)
        except BaseException:
            self._zip.close()
            raise

        self._log.debug(
            "mounted %s (root %r) at %s: %d entries",
            archive,
            archive_root,
            self.mount_root,
            len(self._entries),
        )

    @property
    def entries(self) -> Mapping[str, ArchiveEntry]:
        """Read-only view of the archive index."""
        return MappingProxyType(self._entries)

    def close(self) -> None:
        """Release the archive handle."""
        self._zip.close()

    def __enter__(self) -> ZipFS:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<ZipFS {self.archive_path} at {self.mount_root}>"

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def _absolute(self, path: str) -> str:
        return os.path.normpath(os.path.join(self._cwd, path))

    def _archive_name(self, path: str) -> str | None:
        """Map an absolute path to its canonical archive name.

        Returns None when the path lies outside the mount root.
        """
        if not is_rooted(path, self.mount_root, os.sep):
            return None
        return strip_root(path, self.mount_root, os.sep).replace(os.sep, "/")

    def _lookup(self, name: str, path: str) -> ArchiveEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        return entry

    # -------------------------------------------------------------------------
    # FileSystem interface
    # -------------------------------------------------------------------------

    def getcwd(self) -> str:
        return self._cwd

    def open(self, path: str) -> BinaryIO:
        """Open a file for reading.

        Raises:
            FileNotFoundError: If the path is not in the archive.
            InvalidTargetError: If the path is a directory or symlink.
        """
        self._log.debug("%r::open(%r)", self, path)
        path = self._absolute(path)
        name = self._archive_name(path)
        if name is None:
            return self._fallback.open(path)

        entry = self._lookup(name, path)
        if entry.kind != MemberKind.FILE:
            raise InvalidTargetError("Not a regular file", path)
        return self._zip.open(entry.info)

    def listdir(self, path: str) -> list[str]:
        """List directory contents.

        Raises:
            FileNotFoundError: If the path is not in the archive.
            InvalidTargetError: If the path is not a directory.
        """
        self._log.debug("%r::listdir(%r)", self, path)
        path = self._absolute(path)
        name = self._archive_name(path)
        if name is None:
            names = self._fallback.listdir(path)
            if path == self._mount_parent and self._mount_name not in names:
                names = names + [self._mount_name]
            return names

        entry = self._lookup(name, path)
        if entry.kind != MemberKind.DIR:
            raise InvalidTargetError("Not a directory", path)
        return list(entry.children)

    def stat(self, path: str) -> FileStat:
        """Get file metadata.

        Raises:
            FileNotFoundError: If the path is not in the archive.
        """
        self._log.debug("%r::stat(%r)", self, path)
        path = self._absolute(path)
        name = self._archive_name(path)
        if name is None:
            return self._fallback.stat(path)

        entry = self._lookup(name, path)
        if entry.kind == MemberKind.DIR or entry.info is None:
            return FileStat(is_dir=True, mode=stat_mod.S_IFDIR | 0o755)

        info = entry.info
        return FileStat(
            is_dir=False,
            size=info.file_size,
            mode=member_mode(info),
            # DOS timestamps carry no zone; read them as UTC
            mtime_sec=calendar.timegm(info.date_time + (0, 0, 0)),
        )
