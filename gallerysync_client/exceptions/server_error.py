"""
GallerySync Client - Server Error Exception

Exception raised when a request to the server fails: connection errors,
timeouts, non-success statuses and unparsable response bodies.

Author: GallerySync Project
"""

from typing import Optional

from .api_error import GallerySyncAPIError


class GallerySyncServerError(GallerySyncAPIError):
    """
    Exception for server and transport errors.

    status_code is the HTTP status when the server answered, None when
    the request never got a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
