import copy

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine, SQLModel
from sqlmodel.pool import StaticPool

import api.media.models  # noqa: F401
import api.settings.models  # noqa: F401
import api.sanitizer.plugin as sanitizer_plugin
from core.config import Settings, get_settings
from core.deps import get_db, get_hooks
from core.hooks import HookRegistry
from main import app


class MockMediaStore:
    """In-memory media store that records every call"""

    def __init__(self):
        self.file_paths = {}  # {media_id: path}
        self.metadata = {}  # {media_id: dict}
        self.calls = []  # [(method, media_id, ...)]
        self.fail_on = {}  # {(method, media_id): exception}

    def add(self, media_id, file_path=None, metadata=None):
        self.file_paths[media_id] = file_path
        self.metadata[media_id] = copy.deepcopy(metadata)

    def simulate_error(self, method: str, media_id, error: Exception):
        self.fail_on[(method, media_id)] = error

    def _record(self, method, media_id, *args):
        self.calls.append((method, media_id, *args))
        error = self.fail_on.get((method, media_id))
        if error is not None:
            raise error

    def mutations(self, media_id=None):
        """Setter calls, optionally restricted to one media item"""
        return [
            call for call in self.calls
            if call[0].startswith("set_") and (media_id is None or call[1] == media_id)
        ]

    def list_all_media_ids(self):
        return list(self.file_paths)

    def get_file_path(self, media_id):
        self._record("get_file_path", media_id)
        return self.file_paths.get(media_id)

    def set_file_path(self, media_id, file_path):
        self._record("set_file_path", media_id, file_path)
        self.file_paths[media_id] = file_path

    def get_metadata(self, media_id):
        self._record("get_metadata", media_id)
        return copy.deepcopy(self.metadata.get(media_id))

    def set_metadata(self, media_id, metadata):
        self._record("set_metadata", media_id, copy.deepcopy(metadata))
        self.metadata[media_id] = copy.deepcopy(metadata)


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="upload_dir")
def upload_dir_fixture(tmp_path):
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    return upload_dir


@pytest.fixture(name="test_settings")
def test_settings_fixture(upload_dir):
    return Settings(
        UPLOAD_DIR=str(upload_dir),
        UPLOAD_URL_BASE="https://media.example.com/uploads",
        UPLOADS_USE_YEARMONTH_FOLDERS=False,
        ACTIVATE_PLUGINS_ON_STARTUP=False,
    )


@pytest.fixture(name="registry")
def registry_fixture():
    """Fresh hook registry with the sanitizer plugin registered"""
    registry = HookRegistry()
    sanitizer_plugin.register(registry)
    return registry


@pytest.fixture(name="media_store")
def media_store_fixture():
    return MockMediaStore()


@pytest.fixture(name="client")
def client_fixture(session: Session, test_settings: Settings, registry: HookRegistry):
    def get_db_override():
        return session

    app.dependency_overrides[get_db] = get_db_override
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_hooks] = lambda: registry

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
