"""Configuration for filesystem backends.

Provides configuration dataclasses, the connect_fs factory function and
open_backend, which builds the backend a configuration describes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .base import FileSystem
from .realfs import RealFS
from .tracefs import TraceFS
from .zipfs import ZipFS


@dataclass
class RealFSConfig:
    """Configuration for the plain OS backend.

    Attributes:
        type: Always "real".
        cwd: Working directory. None means the process working directory.
    """

    type: Literal["real"] = "real"
    cwd: str | None = None


@dataclass
class ZipMountConfig:
    """Configuration for a zip archive mounted over the real filesystem.

    Attributes:
        type: Always "zip".
        archive: Path of the zip file on the real filesystem.
        mount_root: Absolute path where the archive subtree appears.
        archive_root: Prefix inside the archive to expose ("" for all).
        cwd: Working directory. None means the process working directory.
    """

    type: Literal["zip"] = "zip"
    archive: str = ""
    mount_root: str = ""
    archive_root: str = ""
    cwd: str | None = None


@dataclass
class TraceFSConfig:
    """Configuration for the recording OS backend.

    Attributes:
        type: Always "trace".
    """

    type: Literal["trace"] = "trace"


# Type alias for all filesystem configs
FSConfig = RealFSConfig | ZipMountConfig | TraceFSConfig


def connect_fs(
    type: Literal["real", "zip", "trace"] = "real",
    **kwargs,
) -> FSConfig:
    """Configure filesystem access.

    Args:
        type: Backend type.
            - "real": The operating system filesystem.
            - "zip": A zip archive mounted at a path, real filesystem
                     elsewhere. Requires 'archive' and 'mount_root'.
            - "trace": The operating system filesystem, recording accesses.
        **kwargs: Additional configuration for the backend type.
            For type="zip":
                - archive (str): Required. Path to the zip file.
                - mount_root (str): Required. Absolute mount path.
                - archive_root (str): Optional. In-archive prefix (default: "").
                - cwd (str): Optional. Working directory.

    Returns:
        FSConfig for open_backend().

    Examples:
        >>> config = connect_fs(
        ...     type="zip",
        ...     archive="deps.zip",
        ...     mount_root="/proj/node_modules",
        ...     archive_root="node_modules/",
        ... )
        >>> config.archive_root
        'node_modules/'
    """
    if type == "real":
        cwd = kwargs.pop("cwd", None)
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for real fs: {list(kwargs.keys())}"
            )
        return RealFSConfig(cwd=cwd)

    elif type == "zip":
        archive = kwargs.pop("archive", "")
        mount_root = kwargs.pop("mount_root", "")
        archive_root = kwargs.pop("archive_root", "")
        cwd = kwargs.pop("cwd", None)

        if kwargs:
            raise ValueError(
                f"Unexpected arguments for zip fs: {list(kwargs.keys())}"
            )

        if not archive:
            raise ValueError("Zip filesystem requires 'archive' parameter")
        if not mount_root:
            raise ValueError("Zip filesystem requires 'mount_root' parameter")

        return ZipMountConfig(
            archive=archive,
            mount_root=mount_root,
            archive_root=archive_root,
            cwd=cwd,
        )

    elif type == "trace":
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for trace fs: {list(kwargs.keys())}"
            )
        return TraceFSConfig()

    else:
        raise ValueError(
            f"Unsupported filesystem type: {type}. Use 'real', 'zip' or 'trace'."
        )


def open_backend(config: FSConfig, log: logging.Logger | None = None) -> FileSystem:
    """Build the backend described by config.

    Args:
        config: Result of connect_fs() or a config dataclass.
        log: Diagnostic sink handed to backends that log.
    """
    if isinstance(config, ZipMountConfig):
        return ZipFS(
            config.archive,
            config.mount_root,
            config.archive_root,
            cwd=config.cwd,
            log=log,
        )
    if isinstance(config, TraceFSConfig):
        return TraceFS()
    if isinstance(config, RealFSConfig):
        return RealFS(config.cwd)
    raise TypeError(f"Unsupported filesystem config: {config!r}")
