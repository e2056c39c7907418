"""
GallerySync Client - Managers Package

Contains manager classes for configuration.

Author: GallerySync Project
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG'
]
