"""Canonical names for archive members.

Archive member names always use "/" regardless of platform, so these
helpers work on plain strings via posixpath.
"""

import posixpath


def clean_name(name: str) -> str:
    """Normalize an archive name for use as an index key.

    Collapses "." and ".." components and repeated separators, then drops
    leading "./" and leading/trailing "/". The current directory cleans to
    the empty string.

    Examples:
        >>> clean_name("./pkg//lib/")
        'pkg/lib'
        >>> clean_name("/pkg/a/../b")
        'pkg/b'
        >>> clean_name("./")
        ''
    """
    name = posixpath.normpath(name) if name else "."
    if name == ".":
        return ""
    if name.startswith("./"):
        name = name[2:]
    return name.strip("/")


def is_rooted(name: str, root: str, sep: str = "/") -> bool:
    """Check whether name is root itself or lies beneath it.

    The character after the prefix must be a separator, so root "abc"
    does not contain "abcd". An empty root contains everything.
    """
    if not root or name == root:
        return True
    if root.endswith(sep):
        return name.startswith(root)
    return name.startswith(root) and name[len(root) : len(root) + 1] == sep


def strip_root(name: str, root: str, sep: str = "/") -> str:
    """Remove the root prefix and any separators left at the front."""
    if root and name.startswith(root):
        name = name[len(root) :]
    return name.lstrip(sep)
