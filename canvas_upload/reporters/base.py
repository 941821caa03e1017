"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from canvas_upload.models import HostTarget, RunResult, UploadBatch, UploadOutcome


class Reporter(ABC):
    """Abstract base class for pipeline progress reporters."""

    @abstractmethod
    def on_files_collected(self, batch: "UploadBatch") -> None:
        """Called once the file set has been discovered."""
        pass

    @abstractmethod
    def on_duplicate_names(self, names: list[str]) -> None:
        """Called when several files share a form field name."""
        pass

    @abstractmethod
    def on_authenticated(self, host: "HostTarget") -> None:
        """Called after a session was derived from the auth probe."""
        pass

    @abstractmethod
    def on_upload_complete(self, outcome: "UploadOutcome") -> None:
        """Called with the upload (or dry-run) outcome."""
        pass

    @abstractmethod
    def on_run_complete(self, result: "RunResult") -> None:
        """Called when the whole pipeline has finished."""
        pass
