"""Index of a zip archive's members.

The index is built once from the archive's member list and maps each
canonical name (relative to the in-archive root) to an ArchiveEntry.
Directories carry the base names of their immediate children.
"""

from __future__ import annotations

import enum
import logging
import posixpath
import stat as stat_mod
import zipfile
from dataclasses import dataclass

from .errors import MalformedArchiveError
from .paths import clean_name, is_rooted, strip_root

# ZipInfo.create_system values
_CREATOR_FAT = 0
_CREATOR_UNIX = 3
_CREATOR_NTFS = 11
_CREATOR_VFAT = 14
_CREATOR_MACOSX = 19

_MSDOS_DIR = 0x10
_MSDOS_READONLY = 0x01


class MemberKind(enum.Enum):
    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"


@dataclass(frozen=True)
class ArchiveEntry:
    """One classified archive member.

    Attributes:
        name: Canonical path relative to the in-archive root ("" is the root).
        kind: File, directory or symlink.
        info: Member used to open contents; None for a synthesized root.
        children: Base names of immediate children (directories only).
    """

    name: str
    kind: MemberKind
    info: zipfile.ZipInfo | None = None
    children: tuple[str, ...] = ()


def member_mode(info: zipfile.ZipInfo) -> int:
    """Return the stat-style mode of a member, type bits included.

    Raises:
        MalformedArchiveError: If the stored type is not a regular file,
            directory or symlink.
    """
    if info.create_system in (_CREATOR_UNIX, _CREATOR_MACOSX):
        mode = info.external_attr >> 16
        fmt = stat_mod.S_IFMT(mode)
        if fmt == 0:
            mode |= stat_mod.S_IFREG
        elif fmt not in (stat_mod.S_IFREG, stat_mod.S_IFDIR, stat_mod.S_IFLNK):
            raise MalformedArchiveError(
                f"unhandled file mode in zip archive: {fmt:#o} ({info.filename!r})"
            )
    elif info.create_system in (_CREATOR_FAT, _CREATOR_NTFS, _CREATOR_VFAT):
        attrs = info.external_attr & 0xFF
        if attrs & _MSDOS_DIR:
            mode = stat_mod.S_IFDIR | 0o777
        else:
            mode = stat_mod.S_IFREG | 0o666
        if attrs & _MSDOS_READONLY:
            mode &= ~0o222
    else:
        mode = stat_mod.S_IFREG

    if info.filename.endswith("/"):
        if stat_mod.S_ISLNK(mode):
            raise MalformedArchiveError(
                f"symlink member named as a directory: {info.filename!r}"
            )
        mode = stat_mod.S_IFDIR | stat_mod.S_IMODE(mode)
    return mode


def member_kind(info: zipfile.ZipInfo) -> MemberKind:
    """Classify a member as file, directory or symlink by its mode bits."""
    mode = member_mode(info)
    if stat_mod.S_ISDIR(mode):
        return MemberKind.DIR
    if stat_mod.S_ISLNK(mode):
        return MemberKind.SYMLINK
    return MemberKind.FILE


def build_index(
    archive: zipfile.ZipFile,
    archive_root: str = "",
    log: logging.Logger | None = None,
) -> dict[str, ArchiveEntry]:
    """Build the canonical-name index for the subtree under archive_root.

    Members are collected first and children attached in a second pass,
    so the result does not depend on the order members appear in.

    Args:
        archive: Open zip archive.
        archive_root: Prefix inside the archive exposed as the root.
        log: Diagnostic sink for recoverable anomalies.

    Returns:
        Mapping of canonical name to entry, always containing the root "".

    Raises:
        MalformedArchiveError: If a member has an unsupported type or two
            members share a canonical name with different kinds.
    """
    log = log or logging.getLogger(__name__)
    root = clean_name(archive_root)

    members: dict[str, tuple[MemberKind, zipfile.ZipInfo]] = {}
    for info in archive.infolist():
        kind = member_kind(info)

        name = clean_name(info.filename)
        if not is_rooted(name, root):
            continue
        name = strip_root(name, root)

        seen = members.get(name)
        if seen is None:
            members[name] = (kind, info)
        elif seen[0] != kind:
            raise MalformedArchiveError(
                f"duplicate entry: {name!r} {seen[0].value} {kind.value}"
            )

    root_member = members.get("")
    if root_member is None:
        log.debug("no member for archive root %r, synthesizing it", root)

    children: dict[str, dict[str, None]] = {}
    if root_member is None or root_member[0] == MemberKind.DIR:
        children[""] = {}
    for name, (kind, _) in members.items():
        if kind == MemberKind.DIR:
            children.setdefault(name, {})
    for name in members:
        if not name:
            continue
        parent = posixpath.dirname(name)
        if parent not in children:
            log.warning("no entry found for dir %r (child %r)", parent, name)
            continue
        children[parent][posixpath.basename(name)] = None

    index = {
        name: ArchiveEntry(
            name=name,
            kind=kind,
            info=info,
            children=tuple(children.get(name, ())),
        )
        for name, (kind, info) in members.items()
    }
    if "" not in index:
        index[""] = ArchiveEntry(
            name="", kind=MemberKind.DIR, children=tuple(children[""])
        )
    return index
