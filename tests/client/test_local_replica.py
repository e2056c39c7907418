"""
Tests for the local replica and its storage in GallerySync Client
"""

import json
import threading

from gallerysync_client.models import ImageRecord, SyncStatus
from gallerysync_client.storage import JsonFileStorage, MemoryStorage, LocalReplica, IMAGES_KEY, LAST_SYNC_KEY


class FakeClock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now


class BrokenStorage:
    """Storage whose every operation fails"""

    def get_item(self, key):
        raise OSError("disk unavailable")

    def set_item(self, key, value):
        raise OSError("disk unavailable")

    def remove_item(self, key):
        raise OSError("disk unavailable")


def make_record(image_id, filename=None):
    return ImageRecord(
        id=image_id,
        filename=filename or f"image-{image_id}.jpg",
        size=1000,
        mimetype="image/jpeg",
        created_at="2025-01-01T00:00:00Z",
        updated_at="2025-01-01T00:00:00Z"
    )


def test_load_all_empty_storage():
    assert LocalReplica(MemoryStorage()).load_all() == []


def test_load_all_invalid_json():
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: "invalid json"}))
    assert replica.load_all() == []


def test_load_all_non_list_value():
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: json.dumps({"id": 1})}))
    assert replica.load_all() == []


def test_load_all_fills_defaults_for_missing_fields():
    """Older replicas did not store every field"""
    stored = [{
        "id": 1,
        "filename": "test.jpg",
        "createdAt": "2025-01-01T00:00:00Z",
        "size": 1000,
    }]
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: json.dumps(stored)}))

    record = replica.load_all()[0]

    assert record.sync_status == SyncStatus.SYNCED
    assert record.mimetype == "image/jpeg"
    assert record.thumbnail == "/thumbnails/thumb-test.jpg"
    assert record.original == "/uploads/images/test.jpg"
    assert record.updated_at == "2025-01-01T00:00:00Z"
    assert record.last_modified == 1735689600000


def test_load_all_drops_malformed_entries_and_duplicates():
    stored = [
        {"filename": "no-id.jpg"},
        "not an object",
        {"id": 1, "filename": "first.jpg", "lastModified": 5, "syncStatus": "synced"},
        {"id": 2, "filename": "b.jpg", "lastModified": 5, "syncStatus": "unknown"},
        {"id": 1, "filename": "second.jpg", "lastModified": 6, "syncStatus": "pending"},
    ]
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: json.dumps(stored)}))

    records = replica.load_all()

    assert len(records) == 1
    assert records[0].filename == "second.jpg"
    assert records[0].sync_status == SyncStatus.PENDING


def test_load_all_skips_non_finite_last_modified():
    """NaN and Infinity are valid to json.loads but are not timestamps"""
    raw = ('[{"id": 1, "filename": "a.jpg", "lastModified": NaN},'
           ' {"id": 3, "filename": "c.jpg", "lastModified": 1e400},'
           ' {"id": 4, "filename": "d.jpg", "lastModified": -Infinity},'
           ' {"id": 2, "filename": "b.jpg", "lastModified": 10, "syncStatus": "pending"}]')
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: raw}))

    assert [r.id for r in replica.load_all()] == [2]
    summary = replica.status_summary()
    assert (summary.pending, summary.total) == (1, 1)


def test_load_all_only_entry_non_finite():
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: '[{"id": 1, "filename": "a.jpg", "lastModified": NaN}]'}))

    assert replica.load_all() == []
    assert replica.status_summary().total == 0


def test_upsert_inserts_and_overwrites():
    clock = FakeClock(100)
    replica = LocalReplica(MemoryStorage(), clock=clock)

    replica.upsert(make_record(1, "a.jpg"))
    clock.now = 200
    replica.upsert(make_record(1, "b.jpg"))

    records = replica.load_all()
    assert len(records) == 1
    assert records[0].filename == "b.jpg"
    assert records[0].last_modified == 200
    assert records[0].sync_status == SyncStatus.SYNCED


def test_upsert_never_moves_last_modified_backwards():
    clock = FakeClock(500)
    replica = LocalReplica(MemoryStorage(), clock=clock)
    replica.upsert(make_record(1))

    clock.now = 400
    replica.upsert(make_record(1))

    assert replica.get(1).last_modified == 500


def test_upsert_resets_pending_status():
    replica = LocalReplica(MemoryStorage(), clock=FakeClock())
    replica.upsert(make_record(1))
    replica.mark_pending(1)

    replica.upsert(make_record(1))

    assert replica.get(1).sync_status == SyncStatus.SYNCED


def test_mark_pending_refreshes_last_modified():
    clock = FakeClock(100)
    replica = LocalReplica(MemoryStorage(), clock=clock)
    replica.upsert(make_record(1))

    clock.now = 250
    assert replica.mark_pending(1) is True

    record = replica.get(1)
    assert record.sync_status == SyncStatus.PENDING
    assert record.last_modified == 250


def test_mark_pending_unknown_id_is_noop():
    storage = MemoryStorage()
    replica = LocalReplica(storage, clock=FakeClock())
    replica.upsert(make_record(1))
    before = storage.get_item(IMAGES_KEY)

    assert replica.mark_pending(999) is False
    assert storage.get_item(IMAGES_KEY) == before


def test_remove():
    replica = LocalReplica(MemoryStorage(), clock=FakeClock())
    replica.upsert(make_record(1))
    replica.upsert(make_record(2))

    assert replica.remove(1) is True
    assert replica.remove(1) is False
    assert [r.id for r in replica.load_all()] == [2]


def test_status_summary():
    replica = LocalReplica(MemoryStorage(), clock=FakeClock(1234))
    replica.upsert(make_record(1))
    replica.upsert(make_record(2))
    replica.upsert(make_record(3))
    replica.mark_pending(2)

    summary = replica.status_summary()
    assert summary.pending == 1
    assert summary.conflicts == 0
    assert summary.total == 3
    assert summary.last_sync is None

    replica.touch_last_sync()
    assert replica.status_summary().to_dict() == {"pending": 1, "conflicts": 0, "total": 3, "lastSync": 1234}


def test_status_summary_counts_conflicts():
    stored = [
        {"id": 1, "filename": "a.jpg", "lastModified": 1, "syncStatus": "conflict"},
        {"id": 2, "filename": "b.jpg", "lastModified": 1, "syncStatus": "synced"},
    ]
    replica = LocalReplica(MemoryStorage({IMAGES_KEY: json.dumps(stored)}))

    assert replica.status_summary().conflicts == 1


def test_last_sync_stored_as_integer_string():
    storage = MemoryStorage()
    replica = LocalReplica(storage, clock=FakeClock(42))

    assert replica.get_last_sync() is None
    assert replica.touch_last_sync() is True
    assert storage.get_item(LAST_SYNC_KEY) == "42"
    assert replica.get_last_sync() == 42


def test_invalid_last_sync_reads_as_none():
    replica = LocalReplica(MemoryStorage({LAST_SYNC_KEY: "soon"}))
    assert replica.get_last_sync() is None


def test_storage_failures_degrade_to_defaults():
    """Replica is a best-effort cache: failures never propagate"""
    replica = LocalReplica(BrokenStorage(), clock=FakeClock())

    assert replica.load_all() == []
    assert replica.get_last_sync() is None
    assert replica.save_all([]) is False
    assert replica.touch_last_sync() is False
    assert replica.mark_pending(1) is False
    assert replica.remove(1) is False
    replica.upsert(make_record(1))

    summary = replica.status_summary()
    assert (summary.pending, summary.conflicts, summary.total, summary.last_sync) == (0, 0, 0, None)


def test_json_file_storage_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "data")

    assert storage.get_item(IMAGES_KEY) is None
    storage.set_item(IMAGES_KEY, "[]")
    assert storage.get_item(IMAGES_KEY) == "[]"
    assert (tmp_path / "data" / "images.json").exists()
    assert not (tmp_path / "data" / "images.json.tmp").exists()

    storage.remove_item(IMAGES_KEY)
    assert storage.get_item(IMAGES_KEY) is None
    storage.remove_item(IMAGES_KEY)


def test_replica_persists_across_instances(tmp_path):
    replica = LocalReplica(JsonFileStorage(tmp_path), clock=FakeClock())
    replica.upsert(make_record(5, "persisted.jpg"))
    replica.mark_pending(5)

    reopened = LocalReplica(JsonFileStorage(tmp_path))
    record = reopened.get(5)

    assert record.filename == "persisted.jpg"
    assert record.sync_status == SyncStatus.PENDING

    stored = json.loads((tmp_path / "images.json").read_text())
    assert stored[0]["syncStatus"] == "pending"
    assert "lastModified" in stored[0]


def test_mutations_wait_for_replica_lock():
    """A mutation from another thread waits until the lock holder is done"""
    replica = LocalReplica(MemoryStorage(), clock=FakeClock())
    replica.upsert(make_record(1))
    results = []

    with replica.lock:
        worker = threading.Thread(target=lambda: results.append(replica.mark_pending(1)))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert replica.get(1).sync_status == SyncStatus.SYNCED

    worker.join(timeout=5)
    assert results == [True]
    assert replica.get(1).sync_status == SyncStatus.PENDING
