from __future__ import annotations

import logging
import re
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector

from ..core.enums import StorageBackend
from ..core.exceptions import ValidationError
from .connection import SCHEMA_DIR, DBConfig, SQLiteConnection, StorageConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep mysql.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect_mysql(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_mysql_database(target: DBConfig) -> None:
    conn = _connect_mysql(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_bin;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_mysql_schema(target: DBConfig, *, schema_path: Optional[str | Path] = None) -> None:
    ensure_mysql_database(target)

    schema_path = Path(schema_path or SCHEMA_DIR / "mysql.sql")
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = _connect_mysql(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("MySQL schema ready on %s@%s:%s/%s", target.user, target.host, target.port, target.database)


def init_storage(storage: StorageConfig) -> None:
    """Create the schema for the configured backend (idempotent)."""
    if storage.backend == StorageBackend.SQLITE:
        SQLiteConnection(storage.sqlite_path).ensure_schema()
        return
    if storage.mysql is None:
        raise ValidationError("DB_CONFIG is required for the mysql storage backend")
    apply_mysql_schema(storage.mysql)


def list_tables(storage: StorageConfig) -> list[str]:
    if storage.backend == StorageBackend.SQLITE:
        conn = sqlite3.connect(storage.sqlite_path)
        try:
            cur = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            return [row[0] for row in cur.fetchall()]
        finally:
            conn.close()

    if storage.mysql is None:
        raise ValidationError("DB_CONFIG is required for the mysql storage backend")
    conn = _connect_mysql(storage.mysql)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
