"""
GallerySync Server - Status Endpoints

This module contains the health check endpoint.
"""

from datetime import datetime, timezone
from fastapi import APIRouter

from gallerysync_server import __version__


# Create router instance
router = APIRouter()


# ==================== Health Check Endpoint ====================

@router.get("/health", tags=["Status"])
async def health_check():
    """
    Health check endpoint to verify server is running

    Returns:
        dict: Server status information
    """
    return {
        "status": "ok",
        "service": "GallerySync Server",
        "version": __version__,
        "timestamp_utc": datetime.now(timezone.utc).isoformat()
    }
