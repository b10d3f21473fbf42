from __future__ import annotations

import pytest

from src.event_checkin.event_checkin.categories.sql_category_repository import (
    MySQLCategoryRepository,
    SQLiteCategoryRepository,
)
from src.event_checkin.event_checkin.container import build_container
from src.event_checkin.event_checkin.core.enums import StorageBackend
from src.event_checkin.event_checkin.core.exceptions import ValidationError
from src.event_checkin.event_checkin.database.connection import StorageConfig
from src.event_checkin.event_checkin.events.sql_event_repository import MySQLEventRepository


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        StorageConfig.from_settings({"STORAGE_BACKEND": "postgres"})


def test_backend_name_is_case_insensitive(tmp_path):
    storage = StorageConfig.from_settings({"STORAGE_BACKEND": " SQLite ", "SQLITE_PATH": str(tmp_path / "a.db")})
    assert storage.backend == StorageBackend.SQLITE
    assert storage.mysql is None


def test_mysql_requires_db_config():
    storage = StorageConfig.from_settings({"STORAGE_BACKEND": "mysql"})
    with pytest.raises(ValidationError):
        build_container(storage=storage)


def test_mysql_backend_wires_mysql_adapters():
    storage = StorageConfig.from_settings(
        {"STORAGE_BACKEND": "mysql", "DB_CONFIG": {"host": "db", "user": "app", "password": "pw", "database": "ev"}}
    )
    container = build_container(storage=storage)

    assert storage.mysql.port == 3306
    assert "pw" not in repr(storage.mysql)
    assert isinstance(container.events_repo, MySQLEventRepository)
    assert isinstance(container.categories_repo, MySQLCategoryRepository)


def test_sqlite_backend_wires_sqlite_adapters(container):
    assert isinstance(container.categories_repo, SQLiteCategoryRepository)
    assert container.storage.backend == StorageBackend.SQLITE
