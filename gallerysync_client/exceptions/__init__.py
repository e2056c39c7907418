"""
GallerySync Client - Exceptions Package

Contains all exception classes for the GallerySync client.

Author: GallerySync Project
"""

from .api_error import GallerySyncAPIError
from .server_error import GallerySyncServerError
from .data_error import GallerySyncDataError

__all__ = [
    'GallerySyncAPIError',
    'GallerySyncServerError',
    'GallerySyncDataError'
]
