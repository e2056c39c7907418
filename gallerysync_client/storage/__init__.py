"""
GallerySync Client - Storage Package

Contains the key/value stores and the local replica built on them.

Author: GallerySync Project
"""

from .key_value_storage import JsonFileStorage, MemoryStorage
from .local_replica import LocalReplica, IMAGES_KEY, LAST_SYNC_KEY

__all__ = [
    'JsonFileStorage',
    'MemoryStorage',
    'LocalReplica',
    'IMAGES_KEY',
    'LAST_SYNC_KEY'
]
