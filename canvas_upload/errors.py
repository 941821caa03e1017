"""Error taxonomy for the canvas uploader.

Every failure the pipeline can produce is a subclass of UploadToolError.
Each subclass carries a ``kind`` discriminant and keeps its context
(status code, path, spec string, underlying cause) as attributes, so the
CLI can print exactly what went wrong.

Library errors are converted at the boundary where they occur:
- httpx.RequestError during the auth probe  -> TransportFailure
- httpx.RequestError during the upload      -> UploadFailure
- OSError while touching local files        -> FileAccessFailure

Conversions always chain the original exception (``raise ... from``).
"""

from typing import Optional


class UploadToolError(Exception):
    """Base class for all uploader failures."""

    kind = "error"


class ConfigError(UploadToolError):
    """Raised when configuration loading fails."""

    kind = "config_error"


class MissingArgument(UploadToolError):
    """A required value was not supplied by flag, environment, or config file."""

    kind = "missing_argument"

    def __init__(self, name: str):
        super().__init__(f"Missing argument: {name}")
        self.name = name


class AuthFailure(UploadToolError):
    """The auth probe returned a status other than 200."""

    kind = "auth_failure"

    def __init__(self, status_code: int):
        super().__init__(f"Failure to auth: {status_code}")
        self.status_code = status_code


class MissingSessionCookie(UploadToolError):
    """The auth probe succeeded but carried no Set-Cookie header."""

    kind = "missing_session_cookie"

    def __init__(self):
        super().__init__("No Set-Cookie header received.")


class TokenExtractionFailure(UploadToolError):
    """No CSRF token could be found in the auth probe response body."""

    kind = "token_extraction"

    def __init__(self, message: str = "No CSRF token found in response body."):
        super().__init__(message)


class TransportFailure(UploadToolError):
    """The auth probe could not be completed at the transport level."""

    kind = "transport_failure"

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Transport failure requesting {url}: {cause}")
        self.url = url
        self.cause = cause


class NoFilesFound(UploadToolError):
    """No regular files were discovered under the given path specs."""

    kind = "no_files_found"

    def __init__(self, spec: str):
        super().__init__(f"No files found in {spec}.")
        self.spec = spec


class MissingFilename(UploadToolError):
    """A discovered path has no final component to use as a field name."""

    kind = "missing_filename"

    def __init__(self, path: str):
        super().__init__(f"Missing filename for path: {path!r}")
        self.path = path


class FileAccessFailure(UploadToolError):
    """A local file could not be stat'ed or opened."""

    kind = "file_access_failure"

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Cannot access {path}: {cause}")
        self.path = path
        self.cause = cause


class UploadFailure(UploadToolError):
    """The upload request could not be completed at the transport level."""

    kind = "upload_failure"

    def __init__(self, cause: Exception, url: Optional[str] = None):
        message = "Upload failure"
        if url:
            message += f" ({url})"
        super().__init__(f"{message}: {cause}")
        self.cause = cause
        self.url = url
