"""Console reporter using Rich library for formatted CLI output.

Shows:
- One line per discovered file and the batch's total size
- The rendered request and form fields in dry-run mode
- The server's response body after a real upload
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.filesize import decimal
from rich.markup import escape
from rich.table import Table

from canvas_upload.client import COOKIE_HEADER, CSRF_HEADER
from canvas_upload.collector import lossy_name
from canvas_upload.models import HostTarget, RunResult, UploadBatch, UploadOutcome
from canvas_upload.reporters.base import Reporter

# Headers whose values are masked unless show_secrets is set
SECRET_HEADERS = {COOKIE_HEADER, CSRF_HEADER, "authorization"}

MASK = "********"


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress per-file output
        show_secrets: If True, print cookie and CSRF values in dry-run output
        console: Console to write to (defaults to stdout)
    """

    def __init__(
        self,
        quiet: bool = False,
        show_secrets: bool = False,
        console: Optional[Console] = None,
    ):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console if console is not None else Console(legacy_windows=True)
        self.quiet = quiet
        self.show_secrets = show_secrets

    def on_files_collected(self, batch: UploadBatch) -> None:
        """Lists every file, then the human-readable total size."""
        if not self.quiet:
            for entry in batch.entries:
                self.console.print(f"File: {escape(entry.base_name)}")

        self.console.print(
            f"Going to attempt to upload files totalling {decimal(batch.total_size_bytes)}."
        )

    def on_duplicate_names(self, names: list[str]) -> None:
        self.console.print(
            f"[yellow]Warning:[/yellow] several files share the name(s) "
            f"{escape(', '.join(names))}; each is sent as its own part."
        )

    def on_authenticated(self, host: HostTarget) -> None:
        if not self.quiet:
            self.console.print(
                f"[dim]Authenticated to {escape(host.base_url)} (canvas {escape(host.canvas_name)})[/dim]"
            )

    def on_upload_complete(self, outcome: UploadOutcome) -> None:
        """Prints the dry-run rendering or the raw response body."""
        if outcome.dry_run:
            self._print_rendering(outcome)
        else:
            # Response body is printed verbatim, without markup processing
            self.console.print(outcome.response_text or "", markup=False, highlight=False)

    def on_run_complete(self, result: RunResult) -> None:
        """No-op for console reporter; everything was printed as it happened."""
        pass

    def _print_rendering(self, outcome: UploadOutcome) -> None:
        rendering = outcome.rendering
        self.console.print(f"[bold]{rendering.method}[/bold] {escape(rendering.url)}")

        headers = Table(title="Headers", box=box.ASCII, show_header=True, header_style="bold magenta")
        headers.add_column("Name", style="cyan", no_wrap=True)
        headers.add_column("Value")
        for name, value in rendering.headers.items():
            if name.lower() in SECRET_HEADERS and not self.show_secrets:
                value = MASK
            headers.add_row(escape(name), escape(value))
        self.console.print(headers)

        fields = Table(title="Form fields", box=box.ASCII, show_header=True, header_style="bold magenta")
        fields.add_column("Field", style="cyan", no_wrap=True)
        fields.add_column("Filename")
        fields.add_column("Content-Type")
        fields.add_column("Size", justify="right")
        fields.add_column("Path", style="dim")
        for form_field in rendering.fields:
            fields.add_row(
                escape(form_field.name),
                escape(form_field.filename),
                form_field.content_type,
                decimal(form_field.size_bytes),
                escape(lossy_name(form_field.path)),
            )
        self.console.print(fields)
