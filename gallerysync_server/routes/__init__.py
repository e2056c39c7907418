"""
GallerySync Server - Routes Package

One APIRouter per module; all are included by server.py.
"""
