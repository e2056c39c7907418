"""
Shared fixtures for GallerySync tests
"""

import pytest
from fastapi.testclient import TestClient

from gallerysync_server import database
from gallerysync_server.managers import DatabaseManager
from gallerysync_server.server import app


@pytest.fixture
def db_manager(tmp_path):
    """Fresh catalog database in a temporary directory"""
    manager = DatabaseManager(str(tmp_path / "database" / "test.db"))
    manager.InitializeDatabase()
    previous = database.db_manager
    database.db_manager = manager
    yield manager
    database.db_manager = previous
    manager.Dispose()


@pytest.fixture
def api_client(db_manager):
    """TestClient bound to the temporary catalog (lifespan not run)"""
    return TestClient(app)


@pytest.fixture
def make_server_image():
    """Build a catalog image dictionary shaped like catalog_store.ImageToDict"""
    from gallerysync_server.catalog_store import FromEpochMillis, ThumbnailPath, OriginalPath

    def _make(image_id, updated_at_ms, filename=None, created_at_ms=None):
        filename = filename or f"image-{image_id}.jpg"
        return {
            'id': image_id,
            'filename': filename,
            'filepath': None,
            'mimetype': 'image/jpeg',
            'size': 1000,
            'created_at': FromEpochMillis(created_at_ms if created_at_ms is not None else updated_at_ms),
            'updated_at': FromEpochMillis(updated_at_ms),
            'thumbnail': ThumbnailPath(filename),
            'original': OriginalPath(filename)
        }

    return _make
