"""Multipart form construction for the static assets upload.

Turns an UploadBatch into a MultipartBody: one form part per file, with
the file's base name as both field name and filename. Building the body
reads nothing from disk; file handles are only opened inside
MultipartBody.open_files() and are closed when that block exits.
"""

import contextlib
import logging
import mimetypes
from collections import Counter
from typing import BinaryIO, Iterator

from canvas_upload.errors import FileAccessFailure
from canvas_upload.models import FormField, UploadBatch

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Shape httpx accepts for ``files=``: (field, (filename, fileobj, content_type))
HttpxFile = tuple[str, tuple[str, BinaryIO, str]]


def guess_content_type(filename: str) -> str:
    """Guess a part's content type from its file extension."""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or DEFAULT_CONTENT_TYPE


class MultipartBody:
    """A multipart form whose part bodies are streamed from disk.

    Can be sent at most once per open_files() block; the form itself is
    reusable.
    """

    def __init__(self, fields: list[FormField]):
        """Initialize the body.

        Args:
            fields: Form parts in upload order
        """
        self.fields = fields

    @property
    def field_names(self) -> list[str]:
        """Field names in form order (duplicates included)."""
        return [f.name for f in self.fields]

    @property
    def total_size_bytes(self) -> int:
        """Sum of the part sizes recorded at collection time."""
        return sum(f.size_bytes for f in self.fields)

    def duplicate_names(self) -> list[str]:
        """Field names that occur more than once, in first-seen order."""
        counts = Counter(self.field_names)
        return [name for name in counts if counts[name] > 1]

    @contextlib.contextmanager
    def open_files(self) -> Iterator[list[HttpxFile]]:
        """Open every part's file for the duration of one request.

        Yields:
            List of (field_name, (filename, file_handle, content_type))
            tuples suitable for httpx's ``files=`` argument.

        Raises:
            FileAccessFailure: If any file cannot be opened. Files opened
                              before the failure are closed.
        """
        with contextlib.ExitStack() as stack:
            files: list[HttpxFile] = []
            for form_field in self.fields:
                try:
                    handle = stack.enter_context(open(form_field.path, "rb"))
                except OSError as e:
                    raise FileAccessFailure(form_field.path, e) from e
                files.append(
                    (form_field.name, (form_field.filename, handle, form_field.content_type))
                )
            yield files

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"MultipartBody(fields={self.field_names!r})"


class UploadRequestBuilder:
    """Builds the multipart form for an upload batch."""

    def build(self, batch: UploadBatch) -> MultipartBody:
        """Create one form part per batch entry, preserving order.

        Repeated base names from different directories are kept as
        separate parts with the same field name.

        Args:
            batch: Collected files

        Returns:
            MultipartBody ready to be sent or rendered
        """
        fields = [
            FormField(
                name=entry.base_name,
                filename=entry.base_name,
                content_type=guess_content_type(entry.base_name),
                path=entry.absolute_path,
                size_bytes=entry.size_bytes,
            )
            for entry in batch.entries
        ]
        body = MultipartBody(fields)

        duplicates = body.duplicate_names()
        if duplicates:
            logger.debug("Duplicate form field names: %s", ", ".join(duplicates))

        return body
