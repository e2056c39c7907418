"""
GallerySync Server - Image Database Model

Image model for the authoritative image metadata catalog.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index

from gallerysync_server.models.database.base import Base


class Image(Base):
    """
    Images table - one row per catalogued image

    updated_at is assigned by the server on every create and update, and is
    the timestamp the sync comparator compares against client lastModified.
    """
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String, nullable=False)
    filepath = Column(String, nullable=True)  # Location of the original on the server, if any
    mimetype = Column(String, nullable=False, default="image/jpeg")
    size = Column(Integer, nullable=True)  # bytes
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        # Index for newest-first listing
        Index('idx_images_created_at', 'created_at'),
        {"sqlite_autoincrement": True}
    )
