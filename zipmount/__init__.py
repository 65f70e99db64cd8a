"""zipmount: Zip archives mounted over the real filesystem for module resolvers."""

from .archive import ArchiveEntry, MemberKind, build_index
from .base import FileStat, FileSystem
from .config import (
    FSConfig,
    RealFSConfig,
    TraceFSConfig,
    ZipMountConfig,
    connect_fs,
    open_backend,
)
from .errors import InvalidTargetError, MalformedArchiveError, ResolveError
from .realfs import RealFS
from .resolver import (
    ClassifiedEntry,
    DirEntries,
    DirEntry,
    EntryKind,
    ModKey,
    ResolverFS,
    WatchData,
)
from .tracefs import TraceFS
from .zipfs import ZipFS

__all__ = [
    "ArchiveEntry",
    "build_index",
    "ClassifiedEntry",
    "connect_fs",
    "DirEntries",
    "DirEntry",
    "EntryKind",
    "FileStat",
    "FileSystem",
    "FSConfig",
    "InvalidTargetError",
    "MalformedArchiveError",
    "MemberKind",
    "ModKey",
    "open_backend",
    "RealFS",
    "RealFSConfig",
    "ResolveError",
    "ResolverFS",
    "TraceFS",
    "TraceFSConfig",
    "WatchData",
    "ZipFS",
    "ZipMountConfig",
]
