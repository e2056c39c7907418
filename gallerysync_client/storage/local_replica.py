"""
GallerySync Client - Local Replica

Persistent local copy of the image catalog used for fast, offline-capable
rendering. The replica is a best-effort cache, not the source of truth:
storage failures are logged and degrade to empty/default results instead
of propagating.

Author: GallerySync Project
"""

import json
import logging
import threading
from typing import Callable, Dict, List, Optional

from gallerysync_client.exceptions import GallerySyncDataError
from gallerysync_client.models import (
    ImageRecord,
    LocalImageRecord,
    SyncStatus,
    SyncStatusSummary,
    current_time_millis
)

# Configure logging
logger = logging.getLogger(__name__)


# Storage keys
IMAGES_KEY = "images"
LAST_SYNC_KEY = "lastSync"


class LocalReplica:
    """
    Thin API over a key/value store holding LocalImageRecords.

    Responsibilities:
    - Load all records, filling defaults and dropping malformed entries
    - Upsert, mark pending and remove single records
    - Track the last successful sync time
    - Summarize sync health for display

    Every mutating operation runs under `lock`. The sync coordinator holds
    the same lock for its whole apply phase, so user-driven mutations are
    serialized with it.

    `lock` is a threading.RLock and only serializes callers within one
    process. Two processes sharing a data directory (e.g. `gallerysync
    pending 3` while another `gallerysync sync` is applying) are not
    serialized: each write replaces the whole file atomically, so the
    store stays readable, but the later writer's mapping wins and a
    mutation made in between can be lost. Run one client per data
    directory.
    """

    def __init__(self, storage, clock: Optional[Callable[[], int]] = None):
        """
        Initialize local replica.

        Args:
            storage: Object with get_item/set_item/remove_item (see key_value_storage)
            clock: Returns the current time in ms since epoch (defaults to wall clock)
        """
        self.storage = storage
        self.clock = clock or current_time_millis
        self.lock = threading.RLock()

    # ==================== Reads ====================

    def read_mapping(self) -> Dict[int, LocalImageRecord]:
        """
        Load the stored records keyed by id, raising if storage is unusable.

        A later entry with a duplicate id replaces the earlier one; entries
        that are not valid records are skipped.

        Raises:
            OSError: If storage cannot be read
            GallerySyncDataError: If the stored value is not a JSON array
        """
        raw = self.storage.get_item(IMAGES_KEY)
        if not raw:
            return {}

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            raise GallerySyncDataError(f"invalid JSON ({e})") from e

        if not isinstance(parsed, list):
            raise GallerySyncDataError("stored value is not a list")

        now = self.clock()
        records: Dict[int, LocalImageRecord] = {}
        for entry in parsed:
            try:
                record = LocalImageRecord.from_stored(entry, now)
            except GallerySyncDataError as e:
                logger.warning(f"Skipping malformed local image: {e}")
                continue
            records[record.id] = record

        return records

    def load_mapping(self) -> Dict[int, LocalImageRecord]:
        """
        Load the stored records keyed by id.

        Never raises: unreadable or invalid storage yields an empty mapping.
        """
        try:
            return self.read_mapping()
        except (OSError, GallerySyncDataError) as e:
            logger.error(f"Failed to load local images: {e}")
            return {}

    def load_all(self) -> List[LocalImageRecord]:
        """Return all records in the replica (empty if storage is unavailable)."""
        return list(self.load_mapping().values())

    def get(self, image_id: int) -> Optional[LocalImageRecord]:
        return self.load_mapping().get(image_id)

    def get_last_sync(self) -> Optional[int]:
        """Return the last successful sync time (ms since epoch), or None."""
        try:
            stored = self.storage.get_item(LAST_SYNC_KEY)
            return int(stored) if stored else None
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read last sync time: {e}")
            return None

    def status_summary(self) -> SyncStatusSummary:
        """Count pending and conflicted records and report the last sync time."""
        records = self.load_all()
        return SyncStatusSummary(
            pending=sum(1 for r in records if r.sync_status == SyncStatus.PENDING),
            conflicts=sum(1 for r in records if r.sync_status == SyncStatus.CONFLICT),
            total=len(records),
            last_sync=self.get_last_sync()
        )

    # ==================== Writes ====================

    def save_all(self, records: List[LocalImageRecord]) -> bool:
        """
        Persist the full record list in a single write.

        Returns:
            True if the write succeeded, False otherwise (error is logged)
        """
        try:
            payload = json.dumps([record.to_dict() for record in records])
            self.storage.set_item(IMAGES_KEY, payload)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save local images: {e}")
            return False

    def touch_last_sync(self, timestamp: Optional[int] = None) -> bool:
        """
        Record the last successful sync time.

        Returns:
            True if the write succeeded, False otherwise (error is logged)
        """
        value = timestamp if timestamp is not None else self.clock()
        try:
            self.storage.set_item(LAST_SYNC_KEY, str(value))
            return True
        except OSError as e:
            logger.error(f"Failed to update last sync time: {e}")
            return False

    def apply_upsert(self, mapping: Dict[int, LocalImageRecord], record: ImageRecord,
                     now: int) -> LocalImageRecord:
        """
        Insert or overwrite record in an in-memory mapping as synced.

        lastModified never moves backwards for an existing id.
        """
        previous = mapping.get(record.id)
        last_modified = max(now, previous.last_modified) if previous else now
        local = LocalImageRecord.from_record(record, last_modified, SyncStatus.SYNCED)
        mapping[record.id] = local
        return local

    def upsert(self, record: ImageRecord) -> LocalImageRecord:
        """
        Insert or overwrite the entry for record.id, marked synced.

        Returns:
            The stored LocalImageRecord
        """
        with self.lock:
            mapping = self.load_mapping()
            local = self.apply_upsert(mapping, record, self.clock())
            self.save_all(list(mapping.values()))
            logger.debug(f"Upserted local image {record.id}")
            return local

    def mark_pending(self, image_id: int) -> bool:
        """
        Flag a record as having an uncommitted local change.

        No-op if the id is not in the replica.

        Returns:
            True if the record exists and was marked
        """
        with self.lock:
            mapping = self.load_mapping()
            record = mapping.get(image_id)
            if record is None:
                logger.debug(f"mark_pending ignored for unknown image {image_id}")
                return False

            record.sync_status = SyncStatus.PENDING
            record.last_modified = max(self.clock(), record.last_modified)
            self.save_all(list(mapping.values()))
            logger.debug(f"Marked local image {image_id} pending")
            return True

    def remove(self, image_id: int) -> bool:
        """
        Delete a record from the replica; no-op if absent.

        Returns:
            True if a record was removed
        """
        with self.lock:
            mapping = self.load_mapping()
            if mapping.pop(image_id, None) is None:
                return False
            self.save_all(list(mapping.values()))
            logger.debug(f"Removed local image {image_id}")
            return True
