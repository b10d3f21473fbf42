from __future__ import annotations

import pytest

from src.event_checkin.event_checkin.container import build_container
from src.event_checkin.event_checkin.core.enums import StorageBackend
from src.event_checkin.event_checkin.database.connection import StorageConfig
from src.event_checkin.event_checkin.main import create_app


@pytest.fixture
def storage(tmp_path) -> StorageConfig:
    return StorageConfig(backend=StorageBackend.SQLITE, sqlite_path=str(tmp_path / "events.db"))


@pytest.fixture
def container(storage):
    return build_container(storage=storage)


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(
        {
            "STORAGE_BACKEND": "sqlite",
            "SQLITE_PATH": str(tmp_path / "api.db"),
            "AUTO_INIT_DB": True,
            "PUBLIC_BASE_URL": "http://testserver",
            "TESTING": True,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()
