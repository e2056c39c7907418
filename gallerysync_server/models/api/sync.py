"""
GallerySync Server - Sync API Models

Pydantic models for the POST /sync exchange: the client's per-record sync
summaries in, the three-way reconciliation result out.
"""

from typing import Any, List, Literal
from pydantic import BaseModel, ConfigDict, Field

from gallerysync_server.models.api.image_metadata import ImageMetadata


class SyncRequest(BaseModel):
    """
    Request body for POST /sync

    Entries are kept untyped here so one malformed summary can be dropped
    without rejecting the whole request.
    """
    model_config = ConfigDict(populate_by_name=True)

    local_images: List[Any] = Field(alias="localImages")


class SyncSummary(BaseModel):
    """Minimal per-record state sent by the client"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    last_modified: int = Field(alias="lastModified")  # milliseconds since epoch
    sync_status: Literal["synced", "pending", "conflict"] = Field(alias="syncStatus")


class ConflictEntry(BaseModel):
    """A remote change made after an uncommitted local edit"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    remote_updated_at: int = Field(alias="remoteUpdatedAt")  # milliseconds since epoch
    local_last_modified: int = Field(alias="localLastModified")  # milliseconds since epoch


class SyncResponse(BaseModel):
    """Reconciliation result returned by POST /sync"""
    model_config = ConfigDict(populate_by_name=True)

    added_or_updated: List[ImageMetadata] = Field(default_factory=list, alias="addedOrUpdated")
    removed: List[int] = Field(default_factory=list)
    conflicts: List[ConflictEntry] = Field(default_factory=list)
