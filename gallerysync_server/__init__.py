"""
GallerySync Server

Authoritative image metadata catalog and sync comparator service.
"""

__version__ = "1.0.0"
