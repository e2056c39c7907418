"""
GallerySync Server - Managers Package

This package contains manager classes for database and other operations.
"""

from gallerysync_server.managers.database_manager import DatabaseManager

__all__ = ['DatabaseManager']
