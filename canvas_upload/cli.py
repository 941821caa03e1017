"""Command-line interface for the canvas uploader.

Provides argument parsing, logging setup, and the main entry point.
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from canvas_upload import __version__
from canvas_upload.config import ConfigError, resolve_settings
from canvas_upload.errors import MissingArgument, UploadToolError
from canvas_upload.models import HostTarget, RunResult, UploadBatch, UploadOutcome
from canvas_upload.reporters import ConsoleReporter, JsonReporter, Reporter
from canvas_upload.runner import UploadRunner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_files_collected(self, batch: UploadBatch) -> None:
        for reporter in self._reporters:
            reporter.on_files_collected(batch)

    def on_duplicate_names(self, names: list[str]) -> None:
        for reporter in self._reporters:
            reporter.on_duplicate_names(names)

    def on_authenticated(self, host: HostTarget) -> None:
        for reporter in self._reporters:
            reporter.on_authenticated(host)

    def on_upload_complete(self, outcome: UploadOutcome) -> None:
        for reporter in self._reporters:
            reporter.on_upload_complete(outcome)

    def on_run_complete(self, result: RunResult) -> None:
        for reporter in self._reporters:
            reporter.on_run_complete(result)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        verbose: Whether to enable debug logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request at INFO; keep it out of normal output
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="dark-upload",
        description="Upload files to a canvas as static assets",
    )

    parser.add_argument(
        "paths",
        nargs="+",
        help="Files or directories to upload (space-delimited; directories are walked recursively)",
    )

    parser.add_argument("--user", help="Your dark username (or DARK_USER)")
    parser.add_argument("--password", help="Your dark password (or DARK_PASSWORD)")
    parser.add_argument("--canvas", help="Your canvas (or DARK_CANVAS)")

    host_group = parser.add_mutually_exclusive_group()
    host_group.add_argument(
        "--dev",
        action="store_true",
        help="Run against localhost - debug only.",
    )
    host_group.add_argument(
        "--host",
        metavar="NAME_OR_URL",
        help="Named host from the config file, or a literal http(s) URL (or DARK_HOST)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Don't upload to canvas, just print request",
    )

    parser.add_argument(
        "--show-secrets",
        action="store_true",
        help="Show cookie and CSRF token values in dry-run output",
    )

    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Path to configuration file (default: dark.json if present)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-file output",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write a JSON summary of the run to file",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [
        ConsoleReporter(quiet=args.quiet, show_secrets=args.show_secrets),
    ]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def print_error(error: UploadToolError) -> None:
    """Print an error with its discriminant to stderr."""
    print(f"error[{error.kind}]: {error}", file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for pipeline failures,
        2 for configuration errors
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = resolve_settings(
            user=args.user,
            password=args.password,
            canvas=args.canvas,
            host=args.host,
            dev=args.dev,
            config_path=args.config,
        )
    except (ConfigError, MissingArgument) as e:
        print_error(e)
        return EXIT_USAGE

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    runner = UploadRunner(settings.host, settings.credentials, reporter=reporter)

    try:
        runner.run(args.paths, dry_run=args.dry_run)
    except UploadToolError as e:
        logger.debug("Pipeline failed", exc_info=True)
        print_error(e)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
