"""
GallerySync Server - Catalog Store

This module handles the authoritative image metadata store:
- Listing and lookup of catalogued images
- Create, update and delete of image metadata
- Timestamp normalization (UTC, millisecond epoch conversion)

Every write assigns a fresh server-side updated_at, which is the value the
sync comparator compares against client lastModified timestamps.
"""

import logging
from datetime import datetime, timezone, timedelta
from typing import Optional, List

from gallerysync_server.models.database import Image
from gallerysync_server.managers.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


# ==================== Timestamp Helpers ====================

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def UtcNow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def EnsureUtc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Make a datetime timezone-aware

    SQLite returns naive datetimes; every value stored by this module is UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ToEpochMillis(value: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch"""
    return (EnsureUtc(value) - EPOCH) // timedelta(milliseconds=1)


def FromEpochMillis(millis: int) -> datetime:
    """Convert milliseconds since the Unix epoch to a UTC datetime"""
    return EPOCH + timedelta(milliseconds=millis)


# ==================== Record Conversion ====================

def ThumbnailPath(filename: str) -> str:
    return f"/thumbnails/thumb-{filename}"


def OriginalPath(filename: str) -> str:
    return f"/uploads/images/{filename}"


def ImageToDict(image: Image) -> dict:
    """
    Convert an Image row to a plain dictionary

    Returning dictionaries avoids detached instance issues once the
    session is closed.
    """
    return {
        'id': image.id,
        'filename': image.filename,
        'filepath': image.filepath,
        'mimetype': image.mimetype,
        'size': image.size,
        'created_at': EnsureUtc(image.created_at),
        'updated_at': EnsureUtc(image.updated_at),
        'thumbnail': ThumbnailPath(image.filename),
        'original': OriginalPath(image.filename)
    }


# ==================== Queries ====================

def ListImages(db_manager: DatabaseManager, newest_first: bool = False) -> List[dict]:
    """
    List all current images in the catalog

    Args:
        db_manager: DatabaseManager instance
        newest_first: Order by created_at descending instead of by id

    Returns:
        List[dict]: Image metadata dictionaries (see ImageToDict)
    """
    session = db_manager.GetSession()

    try:
        query = session.query(Image)
        if newest_first:
            query = query.order_by(Image.created_at.desc(), Image.id.desc())
        else:
            query = query.order_by(Image.id.asc())

        return [ImageToDict(image) for image in query.all()]

    finally:
        session.close()


def GetImage(db_manager: DatabaseManager, image_id: int) -> Optional[dict]:
    """
    Retrieve one image's metadata

    Returns:
        dict: Image metadata or None if not found
    """
    session = db_manager.GetSession()

    try:
        image = session.query(Image).filter(Image.id == image_id).first()
        if not image:
            return None
        return ImageToDict(image)

    finally:
        session.close()


# ==================== Writes ====================

def CreateImage(db_manager: DatabaseManager, filename: str, size: Optional[int] = None,
                mimetype: str = "image/jpeg", filepath: Optional[str] = None,
                created_at: Optional[datetime] = None) -> dict:
    """
    Add an image to the catalog

    Args:
        db_manager: DatabaseManager instance
        filename: Stored filename of the image
        size: Size in bytes
        mimetype: MIME type of the image
        filepath: Location of the original on the server
        created_at: Creation time (defaults to now); updated_at starts equal to it

    Returns:
        dict: Metadata of the created image, including its assigned id
    """
    session = db_manager.GetSession()
    timestamp = EnsureUtc(created_at) or UtcNow()

    try:
        image = Image(
            filename=filename,
            filepath=filepath,
            mimetype=mimetype,
            size=size,
            created_at=timestamp,
            updated_at=timestamp
        )
        session.add(image)
        session.flush()  # Get the id
        session.commit()
        logger.debug(f"Created image metadata: {filename} (id {image.id})")
        return ImageToDict(image)

    except Exception as e:
        session.rollback()
        logger.error(f"Failed to create image metadata for {filename}: {str(e)}")
        raise
    finally:
        session.close()


def UpdateImage(db_manager: DatabaseManager, image_id: int, filename: Optional[str] = None,
                size: Optional[int] = None, mimetype: Optional[str] = None,
                updated_at: Optional[datetime] = None) -> Optional[dict]:
    """
    Update an image's metadata and refresh its updated_at

    Only the provided fields are changed.

    Returns:
        dict: Updated metadata or None if the image does not exist
    """
    session = db_manager.GetSession()

    try:
        image = session.query(Image).filter(Image.id == image_id).first()
        if not image:
            return None

        if filename is not None:
            image.filename = filename
        if size is not None:
            image.size = size
        if mimetype is not None:
            image.mimetype = mimetype
        image.updated_at = EnsureUtc(updated_at) or UtcNow()

        session.commit()
        logger.debug(f"Updated image metadata: id {image_id}")
        return ImageToDict(image)

    except Exception as e:
        session.rollback()
        logger.error(f"Failed to update image {image_id}: {str(e)}")
        raise
    finally:
        session.close()


def DeleteImage(db_manager: DatabaseManager, image_id: int) -> bool:
    """
    Remove an image from the catalog

    Returns:
        bool: True if the image existed and was deleted
    """
    session = db_manager.GetSession()

    try:
        image = session.query(Image).filter(Image.id == image_id).first()
        if not image:
            return False

        session.delete(image)
        session.commit()
        logger.debug(f"Deleted image metadata: id {image_id}")
        return True

    except Exception as e:
        session.rollback()
        logger.error(f"Failed to delete image {image_id}: {str(e)}")
        raise
    finally:
        session.close()
