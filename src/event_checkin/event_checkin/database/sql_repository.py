from __future__ import annotations

from typing import Any, Dict, List, Optional

from . import mysql_base, sqlite_base


class SQLRepository:
    """Shared plumbing for the SQL repository adapters.

    Queries are written with ``?`` placeholders; adapters for drivers using
    another paramstyle rewrite them in :meth:`_q`.
    """

    placeholder = "?"
    # Secondary sort key making "newest first" listings stable.
    order_tiebreak = "id"

    def __init__(self, conn_factory):
        self._conn_factory = conn_factory

    def _cursor(self):
        raise NotImplementedError

    def _q(self, sql: str) -> str:
        if self.placeholder == "?":
            return sql
        return sql.replace("?", self.placeholder)

    @staticmethod
    def _fetchone(cur) -> Optional[Dict[str, Any]]:
        row = cur.fetchone()
        return dict(row) if row else None

    @staticmethod
    def _fetchall(cur) -> List[Dict[str, Any]]:
        return [dict(r) for r in (cur.fetchall() or [])]

    def _scalar(self, sql: str, params: tuple = ()) -> int:
        with self._cursor() as (_, cur):
            cur.execute(self._q(sql), params)
            row = self._fetchone(cur)
            if not row:
                return 0
            value = next(iter(row.values()))
            return int(value or 0)


class SQLiteRepository(SQLRepository):
    order_tiebreak = "rowid"

    def _cursor(self):
        return sqlite_base.db_cursor(self._conn_factory)


class MySQLRepository(SQLRepository):
    placeholder = "%s"

    def _cursor(self):
        return mysql_base.db_cursor(self._conn_factory, dictionary=True)
