"""
GallerySync Server - Image Catalog Endpoints

This module contains endpoints for listing, reading, creating, updating
and deleting image metadata in the authoritative catalog.
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, status

from gallerysync_server.models.api import (
    ImageMetadata, ImageCreateRequest, ImageUpdateRequest, ImageDeleteResponse
)
from gallerysync_server.catalog_store import ListImages, GetImage, CreateImage, UpdateImage, DeleteImage


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Image Catalog Endpoints ====================

@router.get("/images", response_model=List[ImageMetadata], tags=["Images"])
async def list_images():
    """
    List all images, newest first

    Returns:
        List[ImageMetadata]: Metadata for every catalogued image
    """
    from gallerysync_server.database import db_manager

    try:
        images = ListImages(db_manager, newest_first=True)
        logger.info(f"Listed {len(images)} images")
        return [ImageMetadata.model_validate(image) for image in images]

    except Exception as e:
        logger.error(f"Error listing images: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve image list"
        )


@router.get("/images/{image_id}", response_model=ImageMetadata, tags=["Images"])
async def get_image(image_id: int):
    """
    Get one image's metadata

    Raises:
        HTTPException: 404 if the image does not exist
    """
    from gallerysync_server.database import db_manager

    try:
        image = GetImage(db_manager, image_id)
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Image not found: {image_id}"
            )
        return ImageMetadata.model_validate(image)

    except HTTPException:
        # Re-raise HTTP exceptions
        raise
    except Exception as e:
        logger.error(f"Error retrieving image {image_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve image"
        )


@router.post("/images", response_model=ImageMetadata, status_code=status.HTTP_201_CREATED, tags=["Images"])
async def create_image(request: ImageCreateRequest):
    """
    Add image metadata to the catalog

    The server assigns the id and the createdAt/updatedAt timestamps.
    """
    from gallerysync_server.database import db_manager

    try:
        image = CreateImage(
            db_manager,
            filename=request.filename,
            size=request.size,
            mimetype=request.mimetype,
            filepath=request.filepath
        )
        logger.info(f"Created image {image['id']}: {image['filename']}")
        return ImageMetadata.model_validate(image)

    except Exception as e:
        logger.error(f"Error creating image {request.filename}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create image"
        )


@router.put("/images/{image_id}", response_model=ImageMetadata, tags=["Images"])
async def update_image(image_id: int, request: ImageUpdateRequest):
    """
    Update image metadata

    Every successful update refreshes updatedAt, so clients holding an
    older copy receive this version on their next sync.

    Raises:
        HTTPException: 404 if the image does not exist
    """
    from gallerysync_server.database import db_manager

    try:
        image = UpdateImage(
            db_manager,
            image_id,
            filename=request.filename,
            size=request.size,
            mimetype=request.mimetype
        )
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Image not found: {image_id}"
            )
        logger.info(f"Updated image {image_id}")
        return ImageMetadata.model_validate(image)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating image {image_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update image"
        )


@router.delete("/images/{image_id}", response_model=ImageDeleteResponse, tags=["Images"])
async def delete_image(image_id: int):
    """
    Delete an image from the catalog

    Clients that still hold a synced copy drop it on their next sync.

    Raises:
        HTTPException: 404 if the image does not exist
    """
    from gallerysync_server.database import db_manager

    try:
        if not DeleteImage(db_manager, image_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Image not found: {image_id}"
            )
        logger.info(f"Deleted image {image_id}")
        return ImageDeleteResponse(success=True, message="Image deleted successfully")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting image {image_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete image"
        )
