"""Shared fixtures for the canvas uploader tests."""

import os
import sys

import pytest

from canvas_upload.models import Credentials, HostTarget

from tests.fakes import FakeCanvasHost


@pytest.fixture
def canvas_host():
    """A fake canvas host that accepts the probe and the upload."""
    return FakeCanvasHost()


@pytest.fixture
def host():
    """Target host for tests."""
    return HostTarget(base_url="https://canvas.test", canvas_name="demo")


@pytest.fixture
def credentials():
    """Basic-auth credentials for tests."""
    return Credentials(username="alice", password="secret")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove DARK_* variables and run from an empty directory."""
    for name in ("DARK_USER", "DARK_PASSWORD", "DARK_CANVAS", "DARK_HOST"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def undecodable_file(tmp_path):
    """A 3-byte file named b"bad\\xff.txt", which is not valid UTF-8."""
    if sys.getfilesystemencoding().lower() != "utf-8":
        pytest.skip("file system encoding is not UTF-8")
    directory = tmp_path / "raw"
    directory.mkdir()
    path = directory / os.fsdecode(b"bad\xff.txt")
    try:
        path.write_bytes(b"abc")
    except (OSError, UnicodeEncodeError):
        pytest.skip("file system rejects non-UTF-8 names")
    return path
