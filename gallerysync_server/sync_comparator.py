"""
GallerySync Server - Sync Comparator

Classifies every record for one reconciliation round by comparing the
authoritative catalog against the client's sync summaries.

Classification per authoritative record R:
1. No client summary for R.id -> addedOrUpdated (client has never seen it)
2. Client summary is pending:
   - R.updated_at newer than the summary's lastModified -> conflict
   - otherwise nothing (the local edit is newer)
3. Client summary is synced or conflict:
   - R.updated_at newer than lastModified -> addedOrUpdated
   - otherwise nothing (client is current)
Client summaries whose id is absent from the catalog are reported as
removed unless they are pending (possibly an unsynced local addition).

The comparator only reads. Concurrent rounds against the same catalog are
each an internally consistent snapshot comparison.
"""

import logging
from typing import Any, Iterable, List

from pydantic import ValidationError

from gallerysync_server.catalog_store import ToEpochMillis
from gallerysync_server.models.api import ImageMetadata, SyncSummary, ConflictEntry, SyncResponse

logger = logging.getLogger(__name__)


def ParseSyncSummaries(raw_entries: Iterable[Any]) -> List[SyncSummary]:
    """
    Validate raw client summaries, dropping malformed entries

    An entry without a usable id, timestamp or status is a data anomaly;
    it is logged and skipped so the rest of the round can proceed.

    Args:
        raw_entries: Decoded JSON entries from the request body

    Returns:
        List[SyncSummary]: Valid summaries in request order
    """
    summaries = []
    for index, entry in enumerate(raw_entries):
        try:
            summaries.append(SyncSummary.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Dropping malformed sync summary at index {index}: {e.error_count()} validation error(s)")
    return summaries


def CompareImagesForSync(server_images: Iterable[dict], local_summaries: Iterable[SyncSummary]) -> SyncResponse:
    """
    Compare the authoritative catalog against client summaries

    Pure function: same inputs always give the same result, and nothing
    is written.

    Args:
        server_images: Image metadata dictionaries (see catalog_store.ImageToDict);
                       each must carry 'id' and 'updated_at'
        local_summaries: Client summaries; a later summary for the same id
                         replaces an earlier one

    Returns:
        SyncResponse: addedOrUpdated, removed and conflicts
    """
    summaries = list(local_summaries)
    summaries_by_id = {summary.id: summary for summary in summaries}

    added_or_updated = []
    conflicts = []
    server_ids = set()

    for image in server_images:
        image_id = image['id']
        server_ids.add(image_id)
        remote_updated_at = ToEpochMillis(image['updated_at'])

        local = summaries_by_id.get(image_id)
        if local is None:
            added_or_updated.append(ImageMetadata.model_validate(image))
            continue

        if remote_updated_at <= local.last_modified:
            # Client copy (or its pending edit) is at least as new
            continue

        if local.sync_status == "pending":
            conflicts.append(ConflictEntry(
                id=image_id,
                remote_updated_at=remote_updated_at,
                local_last_modified=local.last_modified
            ))
        else:
            added_or_updated.append(ImageMetadata.model_validate(image))

    removed = []
    for image_id, summary in summaries_by_id.items():
        if image_id not in server_ids and summary.sync_status != "pending":
            removed.append(image_id)

    logger.info(
        f"Sync comparison: {len(added_or_updated)} added/updated, "
        f"{len(removed)} removed, {len(conflicts)} conflicts "
        f"({len(summaries)} client records, {len(server_ids)} server records)"
    )

    return SyncResponse(added_or_updated=added_or_updated, removed=removed, conflicts=conflicts)
