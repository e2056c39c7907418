"""
GallerySync Client - API Package

This package contains the API communication class.
"""

from .gallerysync_api import GallerySyncAPI

__all__ = ['GallerySyncAPI']
