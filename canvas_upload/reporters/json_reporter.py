"""JSON reporter for a structured summary of the run.

Writes RunResult.to_dict() to a file so an upload can be audited or
consumed by other tooling. Credentials and session material never appear
in the output.
"""

import json
from pathlib import Path
from typing import Optional

from canvas_upload.errors import FileAccessFailure
from canvas_upload.models import HostTarget, RunResult, UploadBatch, UploadOutcome
from canvas_upload.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path
        self._duplicates: list[str] = []

    def on_files_collected(self, batch: UploadBatch) -> None:
        """No-op; the batch is part of the final result."""
        pass

    def on_duplicate_names(self, names: list[str]) -> None:
        """Remembers duplicate names for the summary."""
        self._duplicates = list(names)

    def on_authenticated(self, host: HostTarget) -> None:
        """No-op for JSON reporter."""
        pass

    def on_upload_complete(self, outcome: UploadOutcome) -> None:
        """No-op; the outcome is part of the final result."""
        pass

    def on_run_complete(self, result: RunResult) -> dict:
        """Generates the summary and writes it if a path was given.

        Args:
            result: The finished run

        Returns:
            The generated JSON data as a dictionary

        Raises:
            FileAccessFailure: If the summary file cannot be written.
        """
        output = result.to_dict()
        output["duplicate_names"] = self._duplicates

        if self.output_path:
            self._write_to_file(output)

        return output

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        try:
            # Create parent directories if needed
            path.parent.mkdir(parents=True, exist_ok=True)

            with open(path, "w", encoding="utf-8") as f:
                json.dump(output, f, indent=2)
        except OSError as e:
            raise FileAccessFailure(self.output_path, e) from e
