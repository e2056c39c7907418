"""
GallerySync Server - Image Metadata API Models

Pydantic models for image catalog requests and responses.
Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ImageMetadata(BaseModel):
    """Response model for a catalogued image"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    filename: str
    size: Optional[int] = None
    mimetype: str = "image/jpeg"
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    thumbnail: str
    original: str


class ImageCreateRequest(BaseModel):
    filename: str = Field(min_length=1)
    size: Optional[int] = Field(default=None, ge=0)
    mimetype: str = "image/jpeg"
    filepath: Optional[str] = None


class ImageUpdateRequest(BaseModel):
    """All fields optional; only provided fields are changed"""
    filename: Optional[str] = Field(default=None, min_length=1)
    size: Optional[int] = Field(default=None, ge=0)
    mimetype: Optional[str] = None


class ImageDeleteResponse(BaseModel):
    success: bool
    message: str
