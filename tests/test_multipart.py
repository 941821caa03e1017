"""Tests for multipart.py module.

Tests form construction from an upload batch and lazy file handling.
"""

from pathlib import Path

import pytest

from canvas_upload.errors import FileAccessFailure
from canvas_upload.models import FileEntry, UploadBatch
from canvas_upload.multipart import (
    DEFAULT_CONTENT_TYPE,
    MultipartBody,
    UploadRequestBuilder,
    guess_content_type,
)


class TestGuessContentType:
    """Tests for content type guessing."""

    def test_known_extensions(self):
        assert guess_content_type("y.png") == "image/png"
        assert guess_content_type("x.txt") == "text/plain"

    def test_unknown_extension(self):
        assert guess_content_type("blob.zzzunknown") == DEFAULT_CONTENT_TYPE

    def test_no_extension(self):
        assert guess_content_type("LICENSE") == DEFAULT_CONTENT_TYPE


class TestBuild:
    """Tests for UploadRequestBuilder.build."""

    @pytest.fixture
    def batch(self):
        """Batch whose files do not exist on disk."""
        return UploadBatch.from_entries([
            FileEntry("/a/x.txt", "x.txt", 10),
            FileEntry("/b/y.png", "y.png", 20),
        ])

    def test_parts_named_in_order(self, batch):
        """One part per entry, named by base name, in batch order."""
        body = UploadRequestBuilder().build(batch)

        assert body.field_names == ["x.txt", "y.png"]
        assert [f.filename for f in body.fields] == ["x.txt", "y.png"]
        assert [f.path for f in body.fields] == ["/a/x.txt", "/b/y.png"]

    def test_content_types(self, batch):
        body = UploadRequestBuilder().build(batch)

        assert [f.content_type for f in body.fields] == ["text/plain", "image/png"]

    def test_build_does_not_touch_files(self, batch):
        """Building succeeds even though no file exists: nothing is read."""
        body = UploadRequestBuilder().build(batch)

        assert len(body) == 2
        assert body.total_size_bytes == 30

    def test_duplicate_names_passed_through(self):
        """Repeated base names become separate parts with the same name."""
        batch = UploadBatch.from_entries([
            FileEntry("/a/index.html", "index.html", 1),
            FileEntry("/b/index.html", "index.html", 2),
            FileEntry("/b/app.js", "app.js", 3),
        ])

        body = UploadRequestBuilder().build(batch)

        assert body.field_names == ["index.html", "index.html", "app.js"]
        assert body.duplicate_names() == ["index.html"]

    def test_no_duplicates(self):
        batch = UploadBatch.from_entries([FileEntry("/a/x.txt", "x.txt", 1)])
        assert UploadRequestBuilder().build(batch).duplicate_names() == []


class TestOpenFiles:
    """Tests for MultipartBody.open_files."""

    @pytest.fixture
    def body(self, tmp_path: Path):
        first = tmp_path / "x.txt"
        first.write_bytes(b"hello")
        second = tmp_path / "y.png"
        second.write_bytes(b"\x89PNG")
        batch = UploadBatch.from_entries([
            FileEntry(str(first), "x.txt", 5),
            FileEntry(str(second), "y.png", 4),
        ])
        return UploadRequestBuilder().build(batch)

    def test_yields_httpx_files(self, body):
        with body.open_files() as files:
            assert [name for name, _ in files] == ["x.txt", "y.png"]
            filename, handle, content_type = files[0][1]
            assert filename == "x.txt"
            assert content_type == "text/plain"
            assert handle.read() == b"hello"

    def test_handles_closed_after_block(self, body):
        with body.open_files() as files:
            handles = [spec[1] for _, spec in files]

        assert all(handle.closed for handle in handles)

    def test_handles_closed_on_error(self, body):
        with pytest.raises(RuntimeError):
            with body.open_files() as files:
                handles = [spec[1] for _, spec in files]
                raise RuntimeError("send failed")

        assert all(handle.closed for handle in handles)

    def test_missing_file_raises_file_access_failure(self, tmp_path: Path):
        batch = UploadBatch.from_entries([FileEntry(str(tmp_path / "gone.txt"), "gone.txt", 1)])
        body = UploadRequestBuilder().build(batch)

        with pytest.raises(FileAccessFailure) as exc_info:
            with body.open_files():
                pass

        assert exc_info.value.path == str(tmp_path / "gone.txt")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_repr_lists_fields(self, body):
        assert repr(body) == "MultipartBody(fields=['x.txt', 'y.png'])"

    def test_empty_body(self):
        body = MultipartBody([])
        with body.open_files() as files:
            assert files == []
