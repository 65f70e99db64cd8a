"""Tests for archive member classification and index building."""

import logging
import stat
import zipfile

import pytest

from zipmount.archive import MemberKind, build_index, member_kind, member_mode
from zipmount.errors import MalformedArchiveError


def _index(path, archive_root="", log=None):
    with zipfile.ZipFile(path) as zf:
        return build_index(zf, archive_root, log=log)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestMemberKind:
    """Test classification of members by mode bits."""

    def test_plain_file(self, unix_info):
        assert member_kind(unix_info("a.js")) == MemberKind.FILE

    def test_file_without_type_bits(self, unix_info):
        """Test that permission-only modes (zipfile's default) are files."""
        assert member_kind(unix_info("a.js", mode=0o600)) == MemberKind.FILE

    def test_directory(self, unix_info):
        info = unix_info("lib/", mode=stat.S_IFDIR | 0o755)
        assert member_kind(info) == MemberKind.DIR

    def test_trailing_slash_is_directory(self, unix_info):
        assert member_kind(unix_info("lib/", mode=0o644)) == MemberKind.DIR

    def test_symlink(self, unix_info):
        info = unix_info("link", mode=stat.S_IFLNK | 0o777)
        assert member_kind(info) == MemberKind.SYMLINK

    def test_fifo_is_malformed(self, unix_info):
        with pytest.raises(MalformedArchiveError):
            member_kind(unix_info("fifo", mode=stat.S_IFIFO | 0o644))

    def test_symlink_named_as_directory_is_malformed(self, unix_info):
        with pytest.raises(MalformedArchiveError):
            member_kind(unix_info("link/", mode=stat.S_IFLNK | 0o777))

    def test_msdos_directory_attribute(self):
        info = zipfile.ZipInfo("dosdir")
        info.create_system = 0
        info.external_attr = 0x10
        assert member_kind(info) == MemberKind.DIR

    def test_msdos_readonly_file(self):
        info = zipfile.ZipInfo("readme.txt")
        info.create_system = 0
        info.external_attr = 0x01
        mode = member_mode(info)
        assert stat.S_ISREG(mode)
        assert stat.S_IMODE(mode) == 0o444


# ---------------------------------------------------------------------------
# Index building
# ---------------------------------------------------------------------------


class TestBuildIndex:
    """Test build_index()."""

    def test_children_of_directories(self, make_zip):
        path = make_zip([
            ("pkg/", b""),
            ("pkg/lib/", b""),
            ("pkg/lib/index.js", b"x"),
            ("pkg/package.json", b"{}"),
        ])
        index = _index(path, "pkg/")

        assert index[""].kind == MemberKind.DIR
        assert sorted(index[""].children) == ["lib", "package.json"]
        assert index["lib"].children == ("index.js",)
        assert index["lib/index.js"].kind == MemberKind.FILE
        assert index["lib/index.js"].children == ()

    def test_member_order_does_not_matter(self, make_zip):
        """Test that directories listed after their contents still get children."""
        path = make_zip([
            ("pkg/lib/index.js", b"x"),
            ("pkg/lib/util.js", b"y"),
            ("pkg/lib/", b""),
            ("pkg/", b""),
        ])
        index = _index(path, "pkg")

        assert sorted(index["lib"].children) == ["index.js", "util.js"]
        assert index[""].children == ("lib",)

    def test_members_outside_root_are_skipped(self, make_zip):
        path = make_zip([
            ("pkg/", b""),
            ("pkg/a.js", b""),
            ("pkgx/", b""),
            ("pkgx/b.js", b""),
            ("other/c.js", b""),
        ])
        index = _index(path, "pkg")

        assert set(index) == {"", "a.js"}

    def test_empty_root_indexes_everything(self, make_zip):
        path = make_zip([("a/", b""), ("a/b.js", b""), ("c.js", b"")])
        index = _index(path)

        assert sorted(index[""].children) == ["a", "c.js"]
        assert index["a"].children == ("b.js",)

    def test_root_is_synthesized(self, make_zip):
        """Test that archives without a member for the root still get one."""
        path = make_zip([("pkg/index.js", b"")])
        index = _index(path, "pkg")

        assert index[""].kind == MemberKind.DIR
        assert index[""].info is None
        assert index[""].children == ("index.js",)

    def test_orphan_is_logged_not_fatal(self, make_zip, caplog):
        path = make_zip([("pkg/", b""), ("pkg/missing/b.js", b"")])
        log = logging.getLogger("test.sink")

        with caplog.at_level(logging.WARNING, logger="test.sink"):
            index = _index(path, "pkg", log=log)

        assert "missing/b.js" in index
        assert "missing" not in index
        assert index[""].children == ()
        assert any("missing" in r.getMessage() for r in caplog.records)

    def test_unknown_mode_is_malformed(self, make_zip, unix_info):
        path = make_zip([
            ("pkg/", b""),
            (unix_info("pkg/fifo", mode=stat.S_IFIFO | 0o644), b""),
        ])
        with pytest.raises(MalformedArchiveError):
            _index(path, "pkg")

    def test_kind_conflict_is_malformed(self, make_zip):
        """Test that a file and a directory both named 'x' are rejected."""
        path = make_zip([("x", b"file"), ("x/", b"")])
        with pytest.raises(MalformedArchiveError, match="duplicate entry"):
            _index(path)

    def test_same_kind_repeat_keeps_first(self, make_zip):
        path = make_zip([("./a.js", b"first"), ("a.js", b"second")])
        with zipfile.ZipFile(path) as zf:
            index = build_index(zf)
            assert zf.read(index["a.js"].info) == b"first"
        assert index[""].children == ("a.js",)

    def test_root_that_is_a_file_loads(self, make_zip):
        """Test that a file at the archive root is indexed, not rejected."""
        path = make_zip([("pkg", b"not a dir"), ("other.js", b"")])
        index = _index(path, "pkg")

        assert set(index) == {""}
        assert index[""].kind == MemberKind.FILE
        assert index[""].children == ()
