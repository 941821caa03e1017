"""Session derivation from the canvas host's basic-auth probe.

The host has no token endpoint. A session is obtained by:
1. GET {base_url}/a/{canvas} with HTTP Basic auth
2. Taking the raw Set-Cookie header of the 200 response
3. Scraping the CSRF token out of the HTML/JS response body

Token scraping is delegated to a TokenExtractor so alternate strategies
can be substituted and tested without any network I/O.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Union

import httpx

from canvas_upload.errors import (
    AuthFailure,
    MissingSessionCookie,
    TokenExtractionFailure,
    TransportFailure,
)
from canvas_upload.models import Credentials, HostTarget, Session

logger = logging.getLogger(__name__)

# Matches the token assignment emitted by the canvas page
CSRF_TOKEN_PATTERN = r'const csrfToken = "([^"]*)";'


class TokenExtractor(ABC):
    """Strategy for pulling a CSRF token out of a response body."""

    @abstractmethod
    def extract(self, body: str) -> Optional[str]:
        """Return the token found in ``body``, or None if absent."""
        pass


class RegexTokenExtractor(TokenExtractor):
    """Extracts the first capture group of the first regex match.

    Args:
        pattern: Regular expression with at least one capture group
    """

    def __init__(self, pattern: Union[str, "re.Pattern[str]"] = CSRF_TOKEN_PATTERN):
        self.pattern = re.compile(pattern)
        if self.pattern.groups < 1:
            raise ValueError(f"Token pattern needs a capture group: {self.pattern.pattern!r}")

    def extract(self, body: str) -> Optional[str]:
        match = self.pattern.search(body)
        if match is None:
            return None
        return match.group(1)


class SessionAuthenticator:
    """Derives a Session (cookie + CSRF token) from the auth probe.

    Every call performs a fresh round trip; nothing is cached or retried.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        token_extractor: Optional[TokenExtractor] = None,
    ):
        """Initialize the authenticator.

        Args:
            http_client: httpx client used for the probe request
            token_extractor: Strategy for scraping the CSRF token
                            (defaults to RegexTokenExtractor)
        """
        self.http_client = http_client
        self.token_extractor = token_extractor or RegexTokenExtractor()

    def authenticate(self, host: HostTarget, creds: Credentials) -> Session:
        """Perform the auth probe and derive a session.

        Args:
            host: Target host and canvas
            creds: Basic-auth credentials

        Returns:
            Session holding the raw cookie value and CSRF token

        Raises:
            TransportFailure: If the request could not be completed.
            AuthFailure: If the response status is not 200.
            MissingSessionCookie: If no Set-Cookie header was returned.
            TokenExtractionFailure: If the body carries no CSRF token.
        """
        url = host.auth_url
        logger.debug("Auth probe: GET %s as %s", url, creds.username)

        try:
            response = self.http_client.get(
                url,
                auth=httpx.BasicAuth(creds.username, creds.password),
            )
        except httpx.RequestError as e:
            raise TransportFailure(url, e) from e

        if response.status_code != httpx.codes.OK:
            raise AuthFailure(response.status_code)

        cookies = response.headers.get_list("set-cookie")
        if not cookies:
            raise MissingSessionCookie()

        token = self.token_extractor.extract(response.text)
        if token is None:
            raise TokenExtractionFailure()

        logger.debug("Session established for canvas %s", host.canvas_name)
        return Session(cookie_value=cookies[0], csrf_token=token)
