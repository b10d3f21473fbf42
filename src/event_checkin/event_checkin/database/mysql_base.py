from __future__ import annotations

from contextlib import contextmanager

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, DomainError, NotFoundError, PersistenceError
from .connection import MySQLConnection


def translate_mysql_error(exc: mysql.connector.Error) -> DomainError:
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return ConflictError("Record violates a uniqueness constraint")
    if exc.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
        return NotFoundError("Referenced record does not exist")
    return PersistenceError(f"MySQL error: {exc.msg or exc}")


@contextmanager
def db_cursor(conn_factory: MySQLConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise PersistenceError(f"Cannot connect to MySQL: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise translate_mysql_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
