import stat
import zipfile

import pytest


@pytest.fixture
def make_zip(tmp_path):
    """Return a factory writing members (in the given order) to a zip file."""

    def _make(members, name="archive.zip"):
        if isinstance(members, dict):
            members = members.items()
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            for member, data in members:
                zf.writestr(member, data)
        return str(path)

    return _make


@pytest.fixture
def unix_info():
    """Return a factory for ZipInfo members with explicit Unix mode bits."""

    def _info(name, mode=stat.S_IFREG | 0o644, date_time=(2020, 1, 2, 3, 4, 6)):
        info = zipfile.ZipInfo(name, date_time=date_time)
        info.create_system = 3
        info.external_attr = mode << 16
        return info

    return _info
