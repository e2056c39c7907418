"""
GallerySync Client - Sync Operations Module

Implements one reconciliation round between the local replica and the
server under the local-always-wins policy: uncommitted local edits are
committed over newer remote versions, and the discrepancy is reported as
a conflict rather than resolved.

Author: GallerySync Project
"""

import logging
import threading
from typing import Optional, Callable

from gallerysync_client.exceptions import GallerySyncAPIError, GallerySyncDataError
from gallerysync_client.models import SyncResult, SyncStatus, SyncSummary, SyncStatusSummary

# Configure logging
logger = logging.getLogger(__name__)


class SyncOperations:
    """
    Drives reconciliation rounds for a local replica.

    Responsibilities:
    - Build sync summaries from the replica
    - Send them to the server and receive the classified result
    - Apply additions, removals and local-wins commits in one write
    - Reject overlapping rounds
    - Report progress via callbacks
    """

    def __init__(self, api_client, replica):
        """
        Initialize sync operations handler.

        Args:
            api_client: GallerySyncAPI instance (or anything with sync(summaries))
            replica: LocalReplica owned by this coordinator
        """
        self.api = api_client
        self.replica = replica
        self._round_guard = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._round_guard.locked()

    def status(self) -> SyncStatusSummary:
        """Sync health of the replica."""
        return self.replica.status_summary()

    def run_sync(self, progress_callback: Optional[Callable] = None) -> SyncResult:
        """
        Run one reconciliation round.

        Process:
        1. Read the replica and build sync summaries
        2. Send summaries to the server, receive the reconciliation result
        3. Upsert added/updated records as synced
        4. Remove records the server no longer has
        5. Commit remaining pending records as synced (local wins)
        6. Count conflicts reported by the server
        7. Persist the replica in one write and record the sync time

        A transport or response failure in step 2 returns before the replica
        is touched. Only one round may run at a time; an overlapping call is
        rejected without side effects.

        Args:
            progress_callback: Optional callback for progress updates
                             Called with (message: str, current: int, total: int)

        Returns:
            SyncResult: success flag plus uploaded/downloaded/conflict counts
        """
        if not self._round_guard.acquire(blocking=False):
            logger.warning("Sync requested while another sync is in progress")
            return SyncResult.failed("Sync already in progress")

        try:
            return self._run_round(progress_callback)
        finally:
            self._round_guard.release()

    def _run_round(self, progress_callback: Optional[Callable]) -> SyncResult:
        logger.info("Starting sync")

        if progress_callback:
            progress_callback("Reading local replica...", 0, 100)

        # Step 1: Build summaries
        local_records = self.replica.load_all()
        summaries = [SyncSummary.from_local(record) for record in local_records]
        logger.info(f"Local replica has {len(summaries)} images")

        # Step 2: Exchange with server; nothing local changes before this succeeds
        if progress_callback:
            progress_callback("Comparing with server...", 20, 100)

        try:
            result = self.api.sync(summaries)
        except GallerySyncAPIError as e:
            logger.error(f"Sync error: {e}")
            if progress_callback:
                progress_callback(f"Sync failed: {e}", 0, 100)
            return SyncResult.failed(str(e) or "Sync failed")

        logger.info(
            f"Server reported {len(result.added_or_updated)} added/updated, "
            f"{len(result.removed)} removed, {len(result.conflicts)} conflicts"
        )

        if progress_callback:
            progress_callback("Applying changes...", 60, 100)

        sync_result = SyncResult(success=True)

        with self.replica.lock:
            # Re-read under the lock so mutations made during the request are kept
            try:
                mapping = self.replica.read_mapping()
            except (OSError, GallerySyncDataError) as e:
                logger.error(f"Sync aborted: local replica unreadable ({e})")
                if progress_callback:
                    progress_callback("Sync failed: could not read local replica", 0, 100)
                return SyncResult.failed(f"Failed to read local replica: {e}")
            now = self.replica.clock()

            # Step 3: Adopt remote versions
            for image in result.added_or_updated:
                current = mapping.get(image.id)
                if current is not None and current.sync_status == SyncStatus.PENDING:
                    # Edited locally while the request was in flight
                    logger.warning(f"Keeping local edit of image {image.id} over newer server version")
                    sync_result.conflicts += 1
                    continue
                self.replica.apply_upsert(mapping, image, now)
            sync_result.downloaded = len(result.added_or_updated)

            # Step 4: Drop records the server no longer has
            for image_id in result.removed:
                current = mapping.get(image_id)
                if current is not None and current.sync_status == SyncStatus.PENDING:
                    logger.warning(f"Keeping pending local image {image_id} absent from server")
                    continue
                mapping.pop(image_id, None)

            # Step 5: Local always wins
            for record in mapping.values():
                if record.sync_status == SyncStatus.PENDING:
                    record.sync_status = SyncStatus.SYNCED
                    record.last_modified = max(now, record.last_modified)
                    sync_result.uploaded += 1

            # Step 6: Conflicts are reported, not enforced
            sync_result.conflicts += len(result.conflicts)
            for conflict in result.conflicts:
                logger.info(
                    f"Conflict on image {conflict.id}: server updated at {conflict.remote_updated_at}, "
                    f"local edit at {conflict.local_last_modified} (local version kept)"
                )

            # Step 7: Persist in one write
            if progress_callback:
                progress_callback("Saving local replica...", 90, 100)

            if not self.replica.save_all(list(mapping.values())):
                if progress_callback:
                    progress_callback("Sync failed: could not save local replica", 0, 100)
                return SyncResult.failed("Failed to save local replica")

            self.replica.touch_last_sync(now)

        if progress_callback:
            progress_callback(
                f"Sync completed: {sync_result.downloaded} downloaded, "
                f"{sync_result.uploaded} uploaded, {sync_result.conflicts} conflicts",
                100, 100
            )

        logger.info(
            f"Sync completed successfully: uploaded={sync_result.uploaded}, "
            f"downloaded={sync_result.downloaded}, conflicts={sync_result.conflicts}"
        )
        return sync_result
