"""
GallerySync Client - Sync Result Models

Wire models for the sync exchange (summaries out, reconciliation result in)
and the result objects reported to callers.

Author: GallerySync Project
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gallerysync_client.exceptions import GallerySyncDataError
from .image_record import ImageRecord, LocalImageRecord, SyncStatus

# Configure logging
logger = logging.getLogger(__name__)


class SyncSummary(BaseModel):
    """Per-record state sent to the server; never the full record body."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    last_modified: int = Field(alias="lastModified")
    sync_status: SyncStatus = Field(alias="syncStatus")

    @classmethod
    def from_local(cls, record: LocalImageRecord) -> "SyncSummary":
        return cls(id=record.id, last_modified=record.last_modified, sync_status=record.sync_status)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ConflictEntry(BaseModel):
    """Server-side change made after an uncommitted local edit."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    remote_updated_at: int = Field(alias="remoteUpdatedAt")
    local_last_modified: int = Field(alias="localLastModified")


class ReconciliationResult(BaseModel):
    """Classified output of the server's sync comparison."""
    model_config = ConfigDict(populate_by_name=True)

    added_or_updated: List[ImageRecord] = Field(default_factory=list, alias="addedOrUpdated")
    removed: List[int] = Field(default_factory=list)
    conflicts: List[ConflictEntry] = Field(default_factory=list)

    @classmethod
    def from_response(cls, payload: Any) -> "ReconciliationResult":
        """
        Validate a decoded /sync response body.

        Malformed individual entries are dropped and logged; a body that is
        not a result object at all is rejected.

        Args:
            payload: Decoded JSON response body

        Returns:
            ReconciliationResult

        Raises:
            GallerySyncDataError: If the body is not an object or a field is not a list
        """
        if not isinstance(payload, dict):
            raise GallerySyncDataError("Sync response is not a JSON object")

        added_raw = _require_list(payload, "addedOrUpdated")
        removed_raw = _require_list(payload, "removed")
        conflicts_raw = _require_list(payload, "conflicts")

        added = _validate_entries(added_raw, ImageRecord, "record")
        conflicts = _validate_entries(conflicts_raw, ConflictEntry, "conflict")

        removed = []
        for image_id in removed_raw:
            if isinstance(image_id, int) and not isinstance(image_id, bool):
                removed.append(image_id)
            else:
                logger.warning(f"Dropping malformed removed id from sync response: {image_id!r}")

        return cls(added_or_updated=added, removed=removed, conflicts=conflicts)


def _require_list(payload: dict, key: str) -> list:
    value = payload.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise GallerySyncDataError(f"Sync response field '{key}' is not a list")
    return value


def _validate_entries(entries: list, model, label: str) -> list:
    valid = []
    for entry in entries:
        try:
            valid.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Dropping malformed {label} from sync response: {e.error_count()} validation error(s)")
    return valid


@dataclass
class SyncResult:
    """Outcome of one reconciliation round."""
    success: bool
    uploaded: int = 0
    downloaded: int = 0
    conflicts: int = 0
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["error"] is None:
            del data["error"]
        return data


@dataclass
class SyncStatusSummary:
    """Read-only aggregate of replica sync health."""
    pending: int
    conflicts: int
    total: int
    last_sync: Optional[int]

    def to_dict(self) -> dict:
        return {
            "pending": self.pending,
            "conflicts": self.conflicts,
            "total": self.total,
            "lastSync": self.last_sync
        }
