"""
Test /media endpoint
"""

import re
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlmodel import Session

from api.media.models import MediaItem
from core.config import Settings, get_settings
from core.deps import get_hooks
from core.hooks import HookRegistry
from main import app


def _upload(client: TestClient, name: str, data: bytes = b"image-bytes", mime="image/jpeg"):
    return client.post("/api/v1/media", files={"file": (name, data, mime)})


def test_upload_sanitizes_file_name(client: TestClient, upload_dir):
    """Test that uploads are stored under their sanitized name"""
    response = _upload(client, "My Photo!!.jpg")
    assert response.status_code == 201
    data = response.json()

    assert data["file"] == "My-Photo.jpg"
    assert data["title"] == "My-Photo"
    assert data["mime_type"] == "image/jpeg"
    assert data["attachment_metadata"] == {
        "file": "My-Photo.jpg",
        "filesize": len(b"image-bytes"),
        "sizes": {},
    }

    # Only the stored file remains, no temporary upload buffers
    assert [p.name for p in upload_dir.iterdir()] == ["My-Photo.jpg"]
    assert (upload_dir / "My-Photo.jpg").read_bytes() == b"image-bytes"


def test_upload_without_sanitizer(client: TestClient, upload_dir):
    """Test that the host keeps the raw name when no upload filter is registered"""
    app.dependency_overrides[get_hooks] = HookRegistry

    response = _upload(client, "My Photo!!.jpg")
    assert response.status_code == 201
    assert response.json()["file"] == "My Photo!!.jpg"
    assert (upload_dir / "My Photo!!.jpg").exists()


def test_upload_duplicate_name(client: TestClient, upload_dir):
    """Test that a second upload with the same name gets a numeric suffix"""
    assert _upload(client, "My Photo!!.jpg").json()["file"] == "My-Photo.jpg"
    assert _upload(client, "My Photo.jpg").json()["file"] == "My-Photo-1.jpg"
    assert (upload_dir / "My-Photo.jpg").exists()
    assert (upload_dir / "My-Photo-1.jpg").exists()


def test_upload_empty_name_rejected(client: TestClient, upload_dir):
    """Test that a name which sanitizes to nothing is rejected by the host"""
    response = _upload(client, "!!!")
    assert response.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_upload_yearmonth_folders(client: TestClient, upload_dir):
    """Test that uploads go into YYYY/MM folders when enabled"""
    app.dependency_overrides[get_settings] = lambda: Settings(
        UPLOAD_DIR=str(upload_dir),
        UPLOADS_USE_YEARMONTH_FOLDERS=True,
    )

    response = _upload(client, "Beach Day.png", mime="image/png")
    assert response.status_code == 201
    file = response.json()["file"]
    assert re.fullmatch(r"\d{4}/\d{2}/Beach-Day\.png", file)
    assert (upload_dir / file).exists()


def test_get_media_items(client: TestClient):
    """Test that we can list media items"""
    response = client.get("/api/v1/media")
    assert response.status_code == 200
    assert response.json() == {
        "data": [],
        "total_items": 0,
        "total_pages": 0,
        "current_page": 1,
        "per_page": 20,
        "has_next": False,
        "has_prev": False,
    }

    for name in ("one.jpg", "two.jpg", "three.jpg"):
        _upload(client, name)

    response = client.get("/api/v1/media?per_page=2")
    data = response.json()
    assert data["total_items"] == 3
    assert data["total_pages"] == 2
    assert data["has_next"] is True
    assert len(data["data"]) == 2


def test_get_media_item(client: TestClient):
    """Test retrieving a single media item"""
    media_id = _upload(client, "one.jpg").json()["id"]

    response = client.get(f"/api/v1/media/{media_id}")
    assert response.status_code == 200
    assert response.json()["file"] == "one.jpg"

    response = client.get(f"/api/v1/media/{uuid4()}")
    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()


def test_get_media_url_and_link(client: TestClient):
    """Test that URL and link generation pass through unchanged"""
    media_id = _upload(client, "My Photo!!.jpg").json()["id"]

    response = client.get(f"/api/v1/media/{media_id}/url")
    assert response.status_code == 200
    assert response.json() == {
        "id": media_id,
        "url": "https://media.example.com/uploads/My-Photo.jpg",
    }

    response = client.get(f"/api/v1/media/{media_id}/link")
    assert response.status_code == 200
    assert response.json()["link"] == (
        '<a href="https://media.example.com/uploads/My-Photo.jpg">My-Photo</a>'
    )


def test_get_media_url_filters(client: TestClient, registry: HookRegistry):
    """Test that attachment_url filters registered by others still apply"""
    media_id = _upload(client, "one.jpg").json()["id"]
    registry.add_filter("attachment_url", lambda url: url + "?v=2", priority=20)

    response = client.get(f"/api/v1/media/{media_id}/url")
    assert response.json()["url"] == "https://media.example.com/uploads/one.jpg?v=2"


def test_get_media_url_absolute_file(client: TestClient, session: Session, tmp_path):
    """Test URLs for files stored outside the upload directory"""
    item = MediaItem(title="legacy", file=str(tmp_path / "legacy" / "legacy.jpg"))
    session.add(item)
    session.commit()

    response = client.get(f"/api/v1/media/{item.id}/url")
    assert response.json()["url"] == "https://media.example.com/uploads/legacy.jpg"


def test_get_media_url_without_file(client: TestClient, session: Session):
    """Test that media items without a file have no URL"""
    item = MediaItem(title="no file")
    session.add(item)
    session.commit()

    response = client.get(f"/api/v1/media/{item.id}/url")
    assert response.status_code == 404


def test_get_media_items_invalid_query(client: TestClient):
    """Test that bad paging or sort parameters are rejected before querying"""
    assert client.get("/api/v1/media?per_page=0").status_code == 422
    assert client.get("/api/v1/media?page=0").status_code == 422
    assert client.get("/api/v1/media?sort_by=model_config").status_code == 422


def test_get_media_items_sorted_by_title(client: TestClient):
    for name in ("b.jpg", "a.jpg", "c.jpg"):
        _upload(client, name)

    response = client.get("/api/v1/media?sort_by=title&sort_order=desc")
    assert response.status_code == 200
    assert [item["title"] for item in response.json()["data"]] == ["c", "b", "a"]
