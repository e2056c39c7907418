"""
GallerySync Server - Database Models Package

This package contains all SQLAlchemy database model definitions.
"""

from gallerysync_server.models.database.base import Base
from gallerysync_server.models.database.image import Image

__all__ = [
    'Base',
    'Image',
]
