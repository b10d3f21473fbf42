from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import mysql.connector

from ..core.constants import DEFAULT_SQLITE_PATH
from ..core.enums import StorageBackend
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schema"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str = field(repr=False)
    database: str

    @classmethod
    def from_mapping(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "event_checkin")),
        )


@dataclass(frozen=True)
class StorageConfig:
    """Process-wide storage selection, decided once when the app is built."""

    backend: StorageBackend
    sqlite_path: str = DEFAULT_SQLITE_PATH
    mysql: Optional[DBConfig] = None

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "StorageConfig":
        raw = str(settings.get("STORAGE_BACKEND", StorageBackend.SQLITE.value)).strip().lower()
        try:
            backend = StorageBackend(raw)
        except ValueError:
            raise ValidationError(f"Unknown storage backend: {raw!r}")

        db_config = settings.get("DB_CONFIG")
        return cls(
            backend=backend,
            sqlite_path=str(settings.get("SQLITE_PATH", DEFAULT_SQLITE_PATH)),
            mysql=DBConfig.from_mapping(db_config) if db_config else None,
        )


class SQLiteConnection:
    """Connection factory for the embedded store.

    Note: We create short-lived connections per operation; the schema is applied
    (idempotently) the first time this factory connects.
    """

    def __init__(self, path: str | Path):
        self._path = str(path)
        self._schema_ready = False

    @property
    def path(self) -> str:
        return self._path

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def connect(self) -> sqlite3.Connection:
        if not self._schema_ready:
            self.ensure_schema()
        return self._open()

    def ensure_schema(self) -> None:
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        conn = self._open()
        try:
            conn.executescript((SCHEMA_DIR / "sqlite.sql").read_text(encoding="utf-8"))
            conn.commit()
        finally:
            conn.close()
        self._schema_ready = True
        logger.info("SQLite schema ready at %s", self._path)


class MySQLConnection:
    """Connection factory for the hosted MySQL service (one connection per operation)."""

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
