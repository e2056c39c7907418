"""
GallerySync Client - Operations Package

This package contains the sync operations classes and functions.
"""

from .sync_operations import SyncOperations

__all__ = ['SyncOperations']
