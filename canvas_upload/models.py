"""Data models for the canvas uploader."""

import time
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Credentials:
    """Basic-auth credentials used only for the auth probe."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class HostTarget:
    """The remote host and canvas that receive the upload."""

    base_url: str
    canvas_name: str

    def __post_init__(self):
        # Strip trailing slashes so derived URLs never contain "//"
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def auth_url(self) -> str:
        """URL of the basic-auth probe page."""
        return f"{self.base_url}/a/{self.canvas_name}"

    @property
    def upload_url(self) -> str:
        """URL of the static assets endpoint."""
        return f"{self.base_url}/api/{self.canvas_name}/static_assets"


@dataclass(frozen=True)
class Session:
    """Cookie and CSRF token derived from the auth probe."""

    cookie_value: str = field(repr=False)
    csrf_token: str = field(repr=False)


@dataclass(frozen=True)
class FileEntry:
    """A single discovered file to upload."""

    absolute_path: str
    base_name: str
    size_bytes: int


@dataclass(frozen=True)
class UploadBatch:
    """The ordered, non-empty set of files for one upload."""

    entries: tuple[FileEntry, ...]
    total_size_bytes: int

    def __post_init__(self):
        if not self.entries:
            raise ValueError("UploadBatch requires at least one entry")
        expected = sum(entry.size_bytes for entry in self.entries)
        if self.total_size_bytes != expected:
            raise ValueError(
                f"total_size_bytes {self.total_size_bytes} does not match "
                f"sum of entries {expected}"
            )

    @classmethod
    def from_entries(cls, entries) -> "UploadBatch":
        """Build a batch, computing the total size from the entries."""
        entries = tuple(entries)
        return cls(
            entries=entries,
            total_size_bytes=sum(entry.size_bytes for entry in entries),
        )

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class FormField:
    """One part of the multipart form."""

    name: str
    filename: str
    content_type: str
    path: str
    size_bytes: int


@dataclass
class DryRunRendering:
    """Inspectable rendering of the upload request that was not sent."""

    method: str
    url: str
    headers: dict[str, str]
    fields: list[FormField]


@dataclass
class UploadOutcome:
    """Result of the upload stage.

    Either ``rendering`` is set (dry run) or ``response_text`` holds the
    server's raw response body.
    """

    dry_run: bool
    response_text: Optional[str] = None
    status_code: Optional[int] = None
    rendering: Optional[DryRunRendering] = None


@dataclass
class RunResult:
    """Summary of one pipeline run."""

    host: HostTarget
    batch: UploadBatch
    outcome: UploadOutcome
    duration_seconds: float = 0.0
    timestamp: str = field(default_factory=lambda: time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Credentials and session material are never included.
        """
        return {
            "timestamp": self.timestamp,
            "host": {
                "base_url": self.host.base_url,
                "canvas": self.host.canvas_name,
            },
            "dry_run": self.outcome.dry_run,
            "files": [
                {
                    "name": entry.base_name,
                    "path": entry.absolute_path,
                    "size_bytes": entry.size_bytes,
                }
                for entry in self.batch.entries
            ],
            "total_size_bytes": self.batch.total_size_bytes,
            "status_code": self.outcome.status_code,
            "duration_seconds": self.duration_seconds,
        }
