"""
GallerySync Client - Data Error Exception

Exception raised when a payload crossing the transport or storage boundary
does not have the expected shape.

Author: GallerySync Project
"""

from .api_error import GallerySyncAPIError


class GallerySyncDataError(GallerySyncAPIError):
    """Exception for malformed records, summaries or responses."""
    pass
