"""
GallerySync Client

Local image catalog replica and the sync coordinator that reconciles it
with the GallerySync server.
"""

__version__ = "1.0.0"
