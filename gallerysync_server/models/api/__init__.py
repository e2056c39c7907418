"""
GallerySync Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from gallerysync_server.models.api.image_metadata import (
    ImageMetadata,
    ImageCreateRequest,
    ImageUpdateRequest,
    ImageDeleteResponse
)
from gallerysync_server.models.api.sync import (
    SyncRequest,
    SyncSummary,
    ConflictEntry,
    SyncResponse
)

__all__ = [
    'ImageMetadata',
    'ImageCreateRequest',
    'ImageUpdateRequest',
    'ImageDeleteResponse',
    'SyncRequest',
    'SyncSummary',
    'ConflictEntry',
    'SyncResponse',
]
