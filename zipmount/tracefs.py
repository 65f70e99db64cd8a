"""Real-filesystem backend that records what a build touched."""

from __future__ import annotations

import os
from typing import BinaryIO

from .base import FileStat


class TraceFS:
    """FileSystem interface over the OS that records every access.

    Keeps, de-duplicated and in first-seen order, the directories listed,
    the files opened and the directories that failed to list. Outcomes are
    never altered: errors propagate unchanged.

    The recorded sets are updated in place. Do not share one instance
    between threads without external locking.
    """

    def __init__(self) -> None:
        self._listed: dict[str, None] = {}
        self._failed: dict[str, None] = {}
        self._opened: dict[str, None] = {}

    def getcwd(self) -> str:
        return os.getcwd()

    def open(self, path: str) -> BinaryIO:
        f = open(path, "rb")
        self._opened.setdefault(path)
        return f

    def listdir(self, path: str) -> list[str]:
        try:
            names = os.listdir(path)
        except OSError:
            self._failed.setdefault(path)
            raise
        self._listed.setdefault(path)
        return names

    def stat(self, path: str) -> FileStat:
        return FileStat.from_stat_result(os.stat(path))

    @property
    def listed_dirs(self) -> tuple[str, ...]:
        return tuple(self._listed)

    @property
    def failed_dirs(self) -> tuple[str, ...]:
        return tuple(self._failed)

    @property
    def opened_files(self) -> tuple[str, ...]:
        return tuple(self._opened)

    def dump(self) -> str:
        """Render the recorded accesses as a report."""
        if not self._listed and not self._opened:
            return "-- nothing was opened --"

        lines = []
        for label, paths in (
            ("dir", self._listed),
            ("try", self._failed),
            ("file", self._opened),
        ):
            if paths:
                lines.extend(f"\t{label}: {p}" for p in paths)
                lines.append("")
        return "\n".join(lines) + "\n"
