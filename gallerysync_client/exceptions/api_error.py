"""
GallerySync Client - API Error Exception

Base exception class for all API-related errors.

Author: GallerySync Project
"""


class GallerySyncAPIError(Exception):
    """Base exception for API errors."""
    pass
