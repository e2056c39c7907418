"""
GallerySync Server - Sync Endpoint

POST /sync: receives the client's per-record sync summaries and returns
the reconciliation result computed against the current catalog.
"""

import json
import logging
from fastapi import APIRouter, HTTPException, status, Request
from pydantic import ValidationError

from gallerysync_server.models.api import SyncRequest, SyncResponse
from gallerysync_server.catalog_store import ListImages
from gallerysync_server.sync_comparator import ParseSyncSummaries, CompareImagesForSync


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Sync Endpoint ====================

@router.post("/sync", response_model=SyncResponse, tags=["Sync"])
async def sync_images(request: Request):
    """
    Reconcile a client replica against the catalog

    Request body: {"localImages": [{"id", "lastModified", "syncStatus"}, ...]}

    A body without a localImages list is rejected with 400. Individual
    malformed summaries are dropped; the rest of the round proceeds.

    Returns:
        SyncResponse: {"addedOrUpdated": [...], "removed": [...], "conflicts": [...]}

    Raises:
        HTTPException: 400 for a malformed body, 500 if the catalog cannot be read
    """
    from gallerysync_server.database import db_manager

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be JSON"
        )

    try:
        sync_request = SyncRequest.model_validate(body)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must contain a localImages list"
        )

    summaries = ParseSyncSummaries(sync_request.local_images)

    try:
        server_images = ListImages(db_manager)
    except Exception as e:
        logger.error(f"Error reading catalog for sync: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute sync result"
        )

    return CompareImagesForSync(server_images, summaries)
