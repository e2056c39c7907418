"""
GallerySync Client - Models Package

Contains data models and enumerations used by the client.

Author: GallerySync Project
"""

from .image_record import (
    SyncStatus,
    ImageRecord,
    LocalImageRecord,
    current_time_millis,
    iso_to_millis,
    millis_to_iso
)
from .sync_result import (
    SyncSummary,
    ConflictEntry,
    ReconciliationResult,
    SyncResult,
    SyncStatusSummary
)

__all__ = [
    'SyncStatus',
    'ImageRecord',
    'LocalImageRecord',
    'current_time_millis',
    'iso_to_millis',
    'millis_to_iso',
    'SyncSummary',
    'ConflictEntry',
    'ReconciliationResult',
    'SyncResult',
    'SyncStatusSummary'
]
