"""
GallerySync Server - Models Package

This package contains all data models for the GallerySync server:
- database: SQLAlchemy database models
- api: API endpoint Pydantic models
"""

# Re-export all models for convenient importing
from gallerysync_server.models.database import *
from gallerysync_server.models.api import *
