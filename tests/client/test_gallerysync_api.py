"""
Tests for the GallerySync Client API module
"""

import pytest
import requests

from gallerysync_client.api import GallerySyncAPI
from gallerysync_client.exceptions import GallerySyncServerError, GallerySyncDataError
from gallerysync_client.models import SyncStatus, SyncSummary

BASE_URL = "http://localhost:4000"


@pytest.fixture
def api():
    client = GallerySyncAPI("http://localhost", 4000, timeout=5)
    yield client
    client.close()


def test_health(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/health", json={"status": "ok"})

    assert api.health() == {"status": "ok"}


def test_sync_posts_summaries(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", json={
        "addedOrUpdated": [{"id": 1, "filename": "a.jpg", "updatedAt": "2025-01-01T00:00:00Z"}],
        "removed": [5],
        "conflicts": []
    })

    result = api.sync([SyncSummary(id=2, last_modified=100, sync_status=SyncStatus.PENDING)])

    assert requests_mock.last_request.json() == {
        "localImages": [{"id": 2, "lastModified": 100, "syncStatus": "pending"}]
    }
    assert requests_mock.last_request.timeout == 5
    assert [image.id for image in result.added_or_updated] == [1]
    assert result.removed == [5]


def test_sync_timeout_override(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", json={"addedOrUpdated": [], "removed": [], "conflicts": []})

    api.sync([], timeout=1.5)

    assert requests_mock.last_request.timeout == 1.5


def test_server_error_raises(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", status_code=500, text="Failed to compute sync result")

    with pytest.raises(GallerySyncServerError, match="Failed to compute sync result"):
        api.sync([])


def test_client_error_uses_detail(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", status_code=400, json={"detail": "localImages must be a list"})

    with pytest.raises(GallerySyncServerError, match="localImages must be a list"):
        api.sync([])


def test_malformed_body_raises(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", text="<html>proxy error</html>")

    with pytest.raises(GallerySyncServerError, match="Malformed response body"):
        api.sync([])


def test_wrong_shape_body_raises_data_error(api, requests_mock):
    requests_mock.post(f"{BASE_URL}/sync", json=["not", "a", "result"])

    with pytest.raises(GallerySyncDataError):
        api.sync([])


@pytest.mark.parametrize("error", [
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.TooManyRedirects,
])
def test_transport_errors_raise_server_error(api, requests_mock, error):
    requests_mock.post(f"{BASE_URL}/sync", exc=error)

    with pytest.raises(GallerySyncServerError):
        api.sync([])


def test_list_images_drops_malformed_entries(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/images", json=[
        {"id": 2, "filename": "b.jpg"},
        {"filename": "no-id.jpg"},
        {"id": 1, "filename": "a.jpg"},
    ])

    assert [image.id for image in api.list_images()] == [2, 1]


def test_list_images_rejects_non_list(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/images", json={"images": []})

    with pytest.raises(GallerySyncDataError):
        api.list_images()


def test_get_image(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/images/3", json={"id": 3, "filename": "c.jpg", "size": 12})

    image = api.get_image(3)

    assert image.id == 3
    assert image.size == 12


def test_get_missing_image(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/images/3", status_code=404, json={"detail": "Image 3 not found"})

    with pytest.raises(GallerySyncServerError, match="404"):
        api.get_image(3)


def test_http_errors_carry_status_code(api, requests_mock):
    requests_mock.get(f"{BASE_URL}/images/3", status_code=404, json={"detail": "Image not found: 3"})
    requests_mock.post(f"{BASE_URL}/sync", exc=requests.exceptions.ConnectionError)

    with pytest.raises(GallerySyncServerError) as excinfo:
        api.get_image(3)
    assert excinfo.value.status_code == 404

    with pytest.raises(GallerySyncServerError) as excinfo:
        api.sync([])
    assert excinfo.value.status_code is None
