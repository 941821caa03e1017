"""
Canvas Static Asset Uploader.

Uploads local files to a canvas as static assets, deriving a session
(cookie + CSRF token) from the host's basic-auth page.
"""

__version__ = "2.0.0"

from canvas_upload.cli import main

__all__ = ["main", "__version__"]
