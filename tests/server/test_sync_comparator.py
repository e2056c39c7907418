"""
Tests for the sync comparator in GallerySync Server

Tests classification of catalog records against client sync summaries.
"""

from datetime import datetime, timezone

from gallerysync_server.catalog_store import ToEpochMillis, FromEpochMillis
from gallerysync_server.models.api import SyncSummary
from gallerysync_server.sync_comparator import CompareImagesForSync, ParseSyncSummaries


def summary(image_id, last_modified, sync_status):
    return SyncSummary(id=image_id, last_modified=last_modified, sync_status=sync_status)


def test_epoch_millis_round_trip_is_exact():
    """Millisecond conversion must not lose precision"""
    dt = datetime(2025, 1, 1, 12, 30, 15, 123000, tzinfo=timezone.utc)
    millis = ToEpochMillis(dt)
    assert millis == 1735734615123
    assert FromEpochMillis(millis) == dt

    # Naive datetimes from SQLite are UTC
    assert ToEpochMillis(dt.replace(tzinfo=None)) == millis


def test_unknown_record_is_added(make_server_image):
    """Catalog records the client has never seen are sent down"""
    result = CompareImagesForSync([make_server_image(7, 10)], [])

    assert [image.id for image in result.added_or_updated] == [7]
    assert result.removed == []
    assert result.conflicts == []


def test_newer_remote_replaces_synced_copy(make_server_image):
    server = [make_server_image(1, 200), make_server_image(2, 200)]
    local = [summary(1, 100, "synced"), summary(2, 100, "conflict")]

    result = CompareImagesForSync(server, local)

    assert [image.id for image in result.added_or_updated] == [1, 2]
    assert result.conflicts == []


def test_current_synced_copy_needs_nothing(make_server_image):
    """Equal timestamps mean the client is current"""
    server = [make_server_image(1, 100), make_server_image(2, 50)]
    local = [summary(1, 100, "synced"), summary(2, 100, "synced")]

    result = CompareImagesForSync(server, local)

    assert result.added_or_updated == []
    assert result.removed == []
    assert result.conflicts == []


def test_pending_newer_than_remote_is_not_reported(make_server_image):
    """Local edit made after the last remote change: nothing to report"""
    result = CompareImagesForSync([make_server_image(1, 50)], [summary(1, 100, "pending")])

    assert result.added_or_updated == []
    assert result.removed == []
    assert result.conflicts == []


def test_pending_older_than_remote_is_a_conflict(make_server_image):
    """Remote changed after the local edit: surface a conflict, never overwrite"""
    result = CompareImagesForSync([make_server_image(1, 1001)], [summary(1, 1000, "pending")])

    assert result.added_or_updated == []
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert conflict.id == 1
    assert conflict.remote_updated_at == 1001
    assert conflict.local_last_modified == 1000


def test_removal_skips_pending_records(make_server_image):
    """Records missing from the catalog are removed unless they are pending"""
    server = [make_server_image(1, 10)]
    local = [
        summary(1, 10, "synced"),
        summary(2, 10, "synced"),
        summary(3, 10, "pending"),
        summary(4, 10, "conflict"),
    ]

    result = CompareImagesForSync(server, local)

    assert result.removed == [2, 4]
    assert result.added_or_updated == []


def test_result_is_deterministic(make_server_image):
    """The same inputs always classify the same way"""
    server = [make_server_image(i, 100 + i) for i in range(1, 6)]
    local = [summary(2, 50, "pending"), summary(3, 500, "synced"), summary(9, 1, "synced")]

    first = CompareImagesForSync(server, local)
    second = CompareImagesForSync(list(server), list(local))

    assert first.model_dump() == second.model_dump()
    assert [image.id for image in first.added_or_updated] == [1, 4, 5]
    assert [c.id for c in first.conflicts] == [2]
    assert first.removed == [9]


def test_duplicate_summaries_last_one_wins(make_server_image):
    local = [summary(1, 10, "synced"), summary(1, 500, "pending")]

    result = CompareImagesForSync([make_server_image(1, 100)], local)

    assert result.added_or_updated == []
    assert result.conflicts == []


def test_wire_format_uses_camel_case(make_server_image):
    result = CompareImagesForSync([make_server_image(1, 1001), make_server_image(2, 5)],
                                  [summary(1, 1000, "pending")])

    wire = result.model_dump(by_alias=True, mode="json")
    assert set(wire.keys()) == {"addedOrUpdated", "removed", "conflicts"}
    assert wire["conflicts"] == [{"id": 1, "remoteUpdatedAt": 1001, "localLastModified": 1000}]
    assert wire["addedOrUpdated"][0]["id"] == 2
    assert "updatedAt" in wire["addedOrUpdated"][0]
    assert wire["addedOrUpdated"][0]["thumbnail"] == "/thumbnails/thumb-image-2.jpg"


def test_parse_summaries_drops_malformed_entries():
    """Malformed entries are data anomalies: skipped, not fatal"""
    raw = [
        {"id": 1, "lastModified": 100, "syncStatus": "synced"},
        {"lastModified": 100, "syncStatus": "synced"},
        {"id": "abc", "lastModified": 100, "syncStatus": "synced"},
        {"id": 2, "lastModified": "yesterday", "syncStatus": "pending"},
        {"id": 3, "lastModified": 100, "syncStatus": "deleted"},
        "not an object",
        None,
        {"id": 4, "lastModified": 200, "syncStatus": "pending"},
    ]

    summaries = ParseSyncSummaries(raw)

    assert [(s.id, s.last_modified, s.sync_status) for s in summaries] == [
        (1, 100, "synced"),
        (4, 200, "pending"),
    ]
