"""
Tests for application startup
"""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from api.media.models import MediaItem
from api.sanitizer.plugin import ACTIVATED_SETTING_KEY
from api.settings.models import Setting
from core.config import get_settings
from core.db import create_db_and_tables, get_engine, reset_engine
from main import app


@pytest.fixture(name="app_env")
def app_env_fixture(monkeypatch, tmp_path):
    """Point the application at a throwaway database and upload directory"""
    upload_dir = tmp_path / "uploads"
    monkeypatch.setenv("SQLALCHEMY_DATABASE_URI", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("UPLOADS_USE_YEARMONTH_FOLDERS", "false")
    get_settings.cache_clear()
    reset_engine()
    yield upload_dir
    get_engine().dispose()
    get_settings.cache_clear()
    reset_engine()


def test_startup_sanitizes_existing_media(app_env):
    """Test that the first startup renames existing media, later ones do not"""
    upload_dir = app_env
    upload_dir.mkdir()
    (upload_dir / "My Photo!!.jpg").write_text("data")

    create_db_and_tables()
    with Session(get_engine()) as session:
        item = MediaItem(title="My Photo", file="My Photo!!.jpg")
        session.add(item)
        session.commit()
        media_id = item.id

    with TestClient(app) as client:
        assert client.get("/api/health").status_code == 200

    with Session(get_engine()) as session:
        assert session.get(MediaItem, media_id).file == "My-Photo.jpg"
        assert session.get(Setting, ACTIVATED_SETTING_KEY).value == "true"
    assert (upload_dir / "My-Photo.jpg").exists()

    # A file added after activation is left alone on the next startup
    (upload_dir / "Late Photo.jpg").write_text("data")
    with Session(get_engine()) as session:
        late = MediaItem(title="Late Photo", file="Late Photo.jpg")
        session.add(late)
        session.commit()
        late_id = late.id

    with TestClient(app):
        pass

    with Session(get_engine()) as session:
        assert session.get(MediaItem, late_id).file == "Late Photo.jpg"
