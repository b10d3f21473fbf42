from __future__ import annotations

import pytest
from mysql.connector import errors

from src.event_checkin.event_checkin.categories.sql_category_repository import MySQLCategoryRepository
from src.event_checkin.event_checkin.core.exceptions import ConflictError, NotFoundError, PersistenceError
from src.event_checkin.event_checkin.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from src.event_checkin.event_checkin.database.mysql_base import db_cursor, translate_mysql_error
from src.event_checkin.event_checkin.events.sql_event_repository import MySQLEventRepository
from src.event_checkin.event_checkin.participants.sql_participant_repository import MySQLParticipantRepository


class FakeCursor:
    def __init__(self, rows=None, fail_on=None):
        self.executed = []
        self.rows = list(rows or [])
        self.rowcount = 1
        self.fail_on = fail_on

    def execute(self, sql, params=()):
        if self.fail_on and self.fail_on in sql:
            raise errors.IntegrityError(msg="Duplicate entry", errno=1062)
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, cursor):
        self.cursor = cursor
        self.connections = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


def test_translate_known_error_codes():
    assert isinstance(translate_mysql_error(errors.IntegrityError(msg="dup", errno=1062)), ConflictError)
    assert isinstance(translate_mysql_error(errors.IntegrityError(msg="fk", errno=1452)), NotFoundError)
    assert isinstance(translate_mysql_error(errors.ProgrammingError(msg="syntax", errno=1064)), PersistenceError)


def test_cursor_commits_and_closes():
    factory = FakeFactory(FakeCursor())
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    conn = factory.connections[0]
    assert conn.committed and conn.closed and not conn.rolled_back


def test_cursor_rolls_back_and_translates():
    factory = FakeFactory(FakeCursor(fail_on="INSERT"))
    with pytest.raises(ConflictError):
        with db_cursor(factory) as (_, cur):
            cur.execute("INSERT INTO events VALUES (1)")

    conn = factory.connections[0]
    assert conn.rolled_back and conn.closed and not conn.committed


def test_connect_failure_is_persistence_error():
    class Down:
        def connect(self):
            raise errors.InterfaceError(msg="Can't connect", errno=2003)

    with pytest.raises(PersistenceError):
        with db_cursor(Down()):
            pass


def test_queries_use_driver_placeholders():
    cursor = FakeCursor(rows=[{"id": "e1", "name": "Cup", "description": None, "date": None, "created_at": 5}])
    repo = MySQLEventRepository(FakeFactory(cursor))

    event = repo.get_by_id("e1")

    assert event.name == "Cup"
    sql, params = cursor.executed[0]
    assert "id=%s" in sql and "?" not in sql
    assert params == ("e1",)


def test_event_delete_removes_children_in_one_transaction():
    cursor = FakeCursor()
    factory = FakeFactory(cursor)

    assert MySQLEventRepository(factory).delete_by_id("e1") is True

    statements = [sql for sql, _ in cursor.executed]
    assert statements[0].startswith("DELETE FROM participants")
    assert statements[1].startswith("DELETE FROM categories")
    assert statements[2].startswith("DELETE FROM events")
    assert len(factory.connections) == 1


def test_category_create_requires_event():
    repo = MySQLCategoryRepository(FakeFactory(FakeCursor(rows=[])))
    with pytest.raises(NotFoundError):
        repo.create(category_id="c1", event_id="missing", name="Finals", created_at=1)


def test_participant_create_requires_category():
    repo = MySQLParticipantRepository(FakeFactory(FakeCursor(rows=[])))
    with pytest.raises(NotFoundError):
        repo.create(
            participant_id="p1", category_id="missing", email="a@b.com", full_name="A",
            school_institution=None, created_at=1,
        )


def test_participant_duplicate_maps_to_conflict():
    repo = MySQLParticipantRepository(FakeFactory(FakeCursor(rows=[{"id": "c1"}], fail_on="INSERT")))
    with pytest.raises(ConflictError):
        repo.create(
            participant_id="p1", category_id="c1", email="a@b.com", full_name="A",
            school_institution=None, created_at=1,
        )


def test_schema_splitter_ignores_quoted_semicolons():
    sql = _strip_create_db_and_use(
        "CREATE DATABASE x;\nUSE x;\nCREATE TABLE a (v TEXT DEFAULT 'a;b');\nCREATE TABLE b (id INT);"
    )
    statements = list(iter_sql_statements(sql))

    assert statements == ["CREATE TABLE a (v TEXT DEFAULT 'a;b')", "CREATE TABLE b (id INT)"]
