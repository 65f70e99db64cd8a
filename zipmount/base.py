"""Base filesystem interface and dataclasses.

Defines the capability interface every backend implements (ZipFS, RealFS,
TraceFS) and the stat descriptor they return.
"""

from __future__ import annotations

import os
import stat as stat_mod
from dataclasses import dataclass
from typing import BinaryIO, Protocol, runtime_checkable


@dataclass(frozen=True)
class FileStat:
    """Stat descriptor for a single file or directory.

    Attributes:
        is_dir: True if this is a directory.
        size: Size in bytes (0 for directories).
        mode: Full mode bits, type included.
        mtime_sec: Modification time, whole seconds since the epoch.
        mtime_nsec: Nanosecond component of the modification time.
    """

    is_dir: bool
    size: int = 0
    mode: int = 0
    mtime_sec: int = 0
    mtime_nsec: int = 0

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> FileStat:
        sec, nsec = divmod(st.st_mtime_ns, 1_000_000_000)
        return cls(
            is_dir=stat_mod.S_ISDIR(st.st_mode),
            size=st.st_size,
            mode=st.st_mode,
            mtime_sec=sec,
            mtime_nsec=nsec,
        )

    # os.stat_result-compatible properties

    @property
    def st_size(self) -> int:
        return self.size

    @property
    def st_mode(self) -> int:
        return self.mode

    @property
    def st_mtime(self) -> float:
        return self.mtime_sec + self.mtime_nsec / 1e9

    @property
    def st_mtime_ns(self) -> int:
        return self.mtime_sec * 1_000_000_000 + self.mtime_nsec


@runtime_checkable
class FileSystem(Protocol):
    """Minimal interface a backend must provide to be used by ResolverFS.

    Paths handed to a backend are absolute; ResolverFS resolves relative
    paths against the working directory before calling in.
    """

    def getcwd(self) -> str:
        """Get current working directory."""
        ...

    def open(self, path: str) -> BinaryIO:
        """Open a file for reading. The caller closes the stream."""
        ...

    def listdir(self, path: str) -> list[str]:
        """List directory contents (base names only)."""
        ...

    def stat(self, path: str) -> FileStat:
        """Get file metadata."""
        ...
