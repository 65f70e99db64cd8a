"""Pass-through backend for the real filesystem."""

from __future__ import annotations

import os
from typing import BinaryIO

from .base import FileStat


class RealFS:
    """FileSystem interface over the operating system.

    Also serves as the fallback for ZipFS paths outside its mount root.
    """

    def __init__(self, cwd: str | None = None):
        self._cwd = cwd if cwd is not None else os.getcwd()

    def getcwd(self) -> str:
        return self._cwd

    def open(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def listdir(self, path: str) -> list[str]:
        return os.listdir(path)

    def stat(self, path: str) -> FileStat:
        return FileStat.from_stat_result(os.stat(path))

    def __repr__(self) -> str:
        return f"<RealFS cwd={self._cwd!r}>"
