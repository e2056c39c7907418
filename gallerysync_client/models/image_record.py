"""
GallerySync Client - Image Record Models

Contains the image metadata record as served by the server and the local
replica's annotated copy of it, plus the timestamp helpers both use.

Author: GallerySync Project
"""

import math
import time
from datetime import datetime, timezone, timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gallerysync_client.exceptions import GallerySyncDataError


DEFAULT_MIMETYPE = "image/jpeg"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SyncStatus(str, Enum):
    """
    Replica bookkeeping state of a local record.

    States:
    - SYNCED: Local copy matches what the server last confirmed
    - PENDING: Local change not yet committed by a sync round
    - CONFLICT: Server changed the record after a local edit
    """
    SYNCED = "synced"
    PENDING = "pending"
    CONFLICT = "conflict"


def current_time_millis() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def iso_to_millis(value: str) -> int:
    """
    Convert an ISO-8601 timestamp to milliseconds since the Unix epoch.

    Naive timestamps are taken as UTC.

    Raises:
        ValueError: If the value is not a valid ISO-8601 timestamp
    """
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(milliseconds=1)


def millis_to_iso(millis: int) -> str:
    """Convert milliseconds since the Unix epoch to an ISO-8601 UTC string."""
    dt = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return dt.isoformat().replace('+00:00', 'Z')


class ImageRecord(BaseModel):
    """
    Image metadata as served by the server.

    Wire and storage names are camelCase; Python attributes are snake_case.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    filename: str
    size: Optional[int] = None
    mimetype: str = DEFAULT_MIMETYPE
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    thumbnail: Optional[str] = None
    original: Optional[str] = None

    @model_validator(mode="after")
    def _derive_paths(self):
        if not self.thumbnail:
            self.thumbnail = f"/thumbnails/thumb-{self.filename}"
        if not self.original:
            self.original = f"/uploads/images/{self.filename}"
        return self

    def to_dict(self) -> dict:
        """Wire/storage representation (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")


class LocalImageRecord(ImageRecord):
    """
    An image record held in the local replica.

    last_modified is the client-observed time (ms since epoch) of the most
    recent local mutation or successful sync of this record.
    """
    last_modified: int = Field(alias="lastModified")
    sync_status: SyncStatus = Field(default=SyncStatus.SYNCED, alias="syncStatus")

    @classmethod
    def from_record(cls, record: ImageRecord, last_modified: int,
                    sync_status: SyncStatus = SyncStatus.SYNCED) -> "LocalImageRecord":
        """Annotate a server record for the replica."""
        data = record.model_dump()
        data["last_modified"] = last_modified
        data["sync_status"] = sync_status
        return cls.model_validate(data)

    @classmethod
    def from_stored(cls, entry: Any, now_millis: int) -> "LocalImageRecord":
        """
        Rebuild a record from a stored entry, filling defaults for fields
        older replicas did not persist.

        Args:
            entry: One decoded element of the stored images array
            now_millis: Fallback timestamp for entries with no timestamps at all

        Returns:
            LocalImageRecord

        Raises:
            GallerySyncDataError: If the entry is not an object, lacks an id/filename
                                  or has a non-finite lastModified
        """
        if not isinstance(entry, dict):
            raise GallerySyncDataError(f"Stored image entry is not an object: {entry!r}")

        data = dict(entry)
        updated_at = data.get("updatedAt") or data.get("createdAt") or millis_to_iso(now_millis)
        data["updatedAt"] = updated_at
        if not data.get("syncStatus"):
            data["syncStatus"] = SyncStatus.SYNCED.value

        last_modified = data.get("lastModified")
        if isinstance(last_modified, bool) or not isinstance(last_modified, (int, float)):
            try:
                data["lastModified"] = iso_to_millis(updated_at)
            except (AttributeError, TypeError, ValueError):
                data["lastModified"] = now_millis
        elif isinstance(last_modified, float) and not math.isfinite(last_modified):
            raise GallerySyncDataError(
                f"Stored image entry {data.get('id')!r} has non-finite lastModified: {last_modified!r}"
            )
        else:
            data["lastModified"] = int(last_modified)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise GallerySyncDataError(f"Invalid stored image entry {entry.get('id')!r}: {e}") from e
