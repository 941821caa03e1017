"""Pipeline orchestrator.

Runs the upload stages strictly in order:
collect files -> authenticate -> build form -> send (or render)

The first failure propagates to the caller untouched; no later stage runs,
so no network traffic happens after a local failure.
"""

import logging
import time
from typing import Optional, Sequence

import httpx

from canvas_upload.auth import SessionAuthenticator, TokenExtractor
from canvas_upload.client import UploadClient
from canvas_upload.collector import FileCollector
from canvas_upload.http_client import build_auth_client, build_upload_client
from canvas_upload.models import Credentials, HostTarget, RunResult
from canvas_upload.multipart import UploadRequestBuilder
from canvas_upload.reporters.base import Reporter

logger = logging.getLogger(__name__)


class UploadRunner:
    """Coordinates one upload of a set of paths to a canvas.

    HTTP clients passed in are owned by the caller. Clients the runner
    builds itself are closed before run() returns.
    """

    def __init__(
        self,
        host: HostTarget,
        credentials: Credentials,
        reporter: Optional[Reporter] = None,
        auth_client: Optional[httpx.Client] = None,
        upload_client: Optional[httpx.Client] = None,
        token_extractor: Optional[TokenExtractor] = None,
        collector: Optional[FileCollector] = None,
        builder: Optional[UploadRequestBuilder] = None,
    ):
        """Initialize the runner.

        Args:
            host: Target host and canvas
            credentials: Basic-auth credentials for the probe
            reporter: Optional reporter for progress callbacks
            auth_client: httpx client for the auth probe
            upload_client: httpx client for the upload call
            token_extractor: CSRF token scraping strategy
            collector: File discovery component
            builder: Multipart form builder
        """
        self.host = host
        self.credentials = credentials
        self.reporter = reporter
        self.auth_client = auth_client
        self.upload_client = upload_client
        self.token_extractor = token_extractor
        self.collector = collector or FileCollector()
        self.builder = builder or UploadRequestBuilder()

    def run(self, path_specs: Sequence[str], dry_run: bool = False) -> RunResult:
        """Run the pipeline once.

        Args:
            path_specs: Whitespace-separated root path lists
            dry_run: Render the upload request instead of sending it

        Returns:
            RunResult describing the batch and the outcome

        Raises:
            UploadToolError: Whichever stage failed first.
        """
        start_time = time.time()

        batch = self.collector.collect(path_specs)
        if self.reporter:
            self.reporter.on_files_collected(batch)

        owned: list[httpx.Client] = []
        try:
            auth_client = self.auth_client or self._own(build_auth_client(), owned)
            authenticator = SessionAuthenticator(auth_client, self.token_extractor)
            session = authenticator.authenticate(self.host, self.credentials)
            if self.reporter:
                self.reporter.on_authenticated(self.host)

            body = self.builder.build(batch)
            duplicates = body.duplicate_names()
            if duplicates and self.reporter:
                self.reporter.on_duplicate_names(duplicates)

            upload_client = self.upload_client or self._own(build_upload_client(), owned)
            outcome = UploadClient(upload_client).send(self.host, session, body, dry_run=dry_run)
            if self.reporter:
                self.reporter.on_upload_complete(outcome)
        finally:
            for client in owned:
                client.close()

        result = RunResult(
            host=self.host,
            batch=batch,
            outcome=outcome,
            duration_seconds=time.time() - start_time,
        )
        logger.debug("Run finished in %.2fs", result.duration_seconds)

        if self.reporter:
            self.reporter.on_run_complete(result)

        return result

    @staticmethod
    def _own(client: httpx.Client, owned: list[httpx.Client]) -> httpx.Client:
        owned.append(client)
        return client
