"""HTTP client factory for the canvas uploader.

Creates httpx clients for the two network stages:

- the auth probe uses httpx's default timeout;
- the upload uses no timeout at all, so uploads of arbitrary size are
  never aborted by a client-side deadline.

Both clients keep httpx's default Accept-Encoding, which requests every
compression scheme httpx can decode in this environment; responses are
decoded transparently.
"""

from typing import Optional, Union

import httpx

from canvas_upload import __version__

# httpx's own default
DEFAULT_TIMEOUT = httpx.Timeout(5.0)

USER_AGENT = f"dark-upload/{__version__}"


def build_http_client(
    timeout: Union[httpx.Timeout, float, None] = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Build an httpx client configured for the canvas host.

    Args:
        timeout: Request timeout; None disables timeouts entirely.
        transport: Optional transport override (used by tests).

    Returns:
        A configured httpx.Client. The caller owns it and must close it.
    """
    return httpx.Client(
        timeout=timeout,
        transport=transport,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )


def build_auth_client(transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Client for the auth probe, using the default timeout."""
    return build_http_client(timeout=DEFAULT_TIMEOUT, transport=transport)


def build_upload_client(transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Client for the upload call, with no timeout."""
    return build_http_client(timeout=None, transport=transport)
