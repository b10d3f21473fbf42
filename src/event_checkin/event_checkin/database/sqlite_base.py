from __future__ import annotations

import sqlite3
from contextlib import contextmanager

from ..core.exceptions import ConflictError, DomainError, NotFoundError, PersistenceError
from .connection import SQLiteConnection


def translate_sqlite_error(exc: sqlite3.Error) -> DomainError:
    message = str(exc)
    if isinstance(exc, sqlite3.IntegrityError):
        if "UNIQUE constraint failed" in message:
            return ConflictError("Record violates a uniqueness constraint")
        if "FOREIGN KEY constraint failed" in message:
            return NotFoundError("Referenced record does not exist")
    return PersistenceError(f"SQLite error: {message}")


@contextmanager
def db_cursor(conn_factory: SQLiteConnection):
    try:
        conn = conn_factory.connect()
    except sqlite3.Error as e:
        raise PersistenceError(f"Cannot open SQLite database: {e}") from e

    try:
        cur = conn.cursor()
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except sqlite3.Error as e:
        conn.rollback()
        raise translate_sqlite_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
