"""Authenticated upload of a multipart body to the static assets endpoint."""

import logging

import httpx

from canvas_upload.errors import UploadFailure
from canvas_upload.models import DryRunRendering, HostTarget, Session, UploadOutcome
from canvas_upload.multipart import MultipartBody

logger = logging.getLogger(__name__)

COOKIE_HEADER = "cookie"
CSRF_HEADER = "x-csrf-token"


def session_headers(session: Session) -> dict[str, str]:
    """The complete authentication contract for the upload call."""
    return {
        COOKIE_HEADER: session.cookie_value,
        CSRF_HEADER: session.csrf_token,
    }


class UploadClient:
    """Sends (or renders) the upload request.

    Args:
        http_client: httpx client; expected to be built without a timeout
                    (see http_client.build_upload_client)
    """

    def __init__(self, http_client: httpx.Client):
        self.http_client = http_client

    def send(
        self,
        host: HostTarget,
        session: Session,
        body: MultipartBody,
        dry_run: bool = False,
    ) -> UploadOutcome:
        """POST the body to the canvas's static assets endpoint.

        Args:
            host: Target host and canvas
            session: Cookie and CSRF token from the auth probe
            body: Multipart form to send
            dry_run: If True, render the request instead of sending it

        Returns:
            UploadOutcome with either the rendering or the response body

        Raises:
            UploadFailure: If the request could not be completed.
            FileAccessFailure: If a part's file cannot be opened.
        """
        url = host.upload_url
        headers = session_headers(session)

        if dry_run:
            return UploadOutcome(dry_run=True, rendering=self.render(url, headers, body))

        logger.debug("Uploading %d parts to %s", len(body), url)
        with body.open_files() as files:
            try:
                response = self.http_client.post(url, headers=headers, files=files)
            except httpx.RequestError as e:
                raise UploadFailure(e, url=url) from e

        # Any received body is returned as-is, whatever the status
        logger.debug("Upload response: %d", response.status_code)
        return UploadOutcome(
            dry_run=False,
            response_text=response.text,
            status_code=response.status_code,
        )

    def render(self, url: str, headers: dict[str, str], body: MultipartBody) -> DryRunRendering:
        """Render the fully configured request without sending it.

        No file handles are opened; the form is described by its fields.
        """
        request = self.http_client.build_request("POST", url, headers=headers)
        return DryRunRendering(
            method=request.method,
            url=str(request.url),
            headers=dict(request.headers),
            fields=list(body.fields),
        )
