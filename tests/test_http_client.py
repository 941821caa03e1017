"""Tests for HTTP client factory module."""

from unittest.mock import MagicMock, patch

import httpx

from canvas_upload import __version__
from canvas_upload.http_client import (
    DEFAULT_TIMEOUT,
    build_auth_client,
    build_http_client,
    build_upload_client,
)


class TestBuildHttpClient:
    """Tests for build_http_client function."""

    @patch("canvas_upload.http_client.httpx.Client")
    def test_user_agent_without_encoding_override(self, mock_client: MagicMock):
        """Only the User-Agent is set; Accept-Encoding is left to httpx."""
        build_http_client()

        headers = mock_client.call_args.kwargs["headers"]
        assert headers == {"User-Agent": f"dark-upload/{__version__}"}

    def test_default_accept_encoding_sent(self):
        """httpx's own compression default reaches the wire."""
        seen = []

        def handler(request):
            seen.append(request.headers["accept-encoding"])
            return httpx.Response(200)

        with build_http_client(transport=httpx.MockTransport(handler)) as client:
            client.get("https://canvas.test/")

        with httpx.Client() as default_client:
            assert seen == [default_client.headers["accept-encoding"]]
        assert "gzip" in seen[0]
        assert "deflate" in seen[0]


class TestClientTimeouts:
    """Tests for the per-stage timeout configuration."""

    def test_upload_client_has_no_timeout(self):
        """Uploads must not be aborted by a client-side deadline."""
        with build_upload_client() as client:
            assert client.timeout == httpx.Timeout(None)

    def test_auth_client_uses_default_timeout(self):
        with build_auth_client() as client:
            assert client.timeout == DEFAULT_TIMEOUT
            assert client.timeout.connect is not None

    def test_transport_override(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))

        with build_upload_client(transport=transport) as client:
            response = client.get("https://canvas.test/")

        assert response.status_code == 204
