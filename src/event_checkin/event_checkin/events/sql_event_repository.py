from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.sql_repository import MySQLRepository, SQLiteRepository, SQLRepository
from .model import Event
from .repository import EventRepository

_UPDATABLE = ("name", "description", "date")


def _to_event(r: Dict[str, Any]) -> Event:
    return Event(
        id=str(r["id"]),
        name=r["name"],
        description=r.get("description"),
        date=int(r["date"]) if r.get("date") is not None else None,
        created_at=int(r["created_at"]),
    )


class SQLEventRepository(SQLRepository, EventRepository):
    def list_all(self) -> Sequence[Event]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT id, name, description, date, created_at
                FROM events
                ORDER BY created_at DESC, {self.order_tiebreak} DESC
                """
            )
            return [_to_event(r) for r in self._fetchall(cur)]

    def get_by_id(self, event_id: str) -> Optional[Event]:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q("SELECT id, name, description, date, created_at FROM events WHERE id=?"),
                (event_id,),
            )
            r = self._fetchone(cur)
            return _to_event(r) if r else None

    def create(
        self,
        *,
        event_id: str,
        name: str,
        description: Optional[str],
        date: Optional[int],
        created_at: int,
    ) -> Event:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q("INSERT INTO events(id, name, description, date, created_at) VALUES(?,?,?,?,?)"),
                (event_id, name, description, date, created_at),
            )
        return Event(id=event_id, name=name, description=description, date=date, created_at=created_at)

    def update(self, event_id: str, fields: Mapping[str, object]) -> Optional[Event]:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if changes:
            assignments = ", ".join(f"{col}=?" for col in changes)
            with self._cursor() as (_, cur):
                cur.execute(
                    self._q(f"UPDATE events SET {assignments} WHERE id=?"),
                    (*changes.values(), event_id),
                )
        return self.get_by_id(event_id)

    def delete_by_id(self, event_id: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(self._q("DELETE FROM events WHERE id=?"), (event_id,))
            return cur.rowcount > 0

    def count_all(self) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM events")


class SQLiteEventRepository(SQLiteRepository, SQLEventRepository):
    """Embedded store: categories and participants go with ON DELETE CASCADE."""


class MySQLEventRepository(MySQLRepository, SQLEventRepository):
    def delete_by_id(self, event_id: str) -> bool:
        # Cascade emulated in one transaction; the server may not enforce foreign keys.
        with self._cursor() as (_, cur):
            cur.execute(
                self._q(
                    """
                    DELETE FROM participants
                    WHERE category_id IN (SELECT id FROM categories WHERE event_id=?)
                    """
                ),
                (event_id,),
            )
            cur.execute(self._q("DELETE FROM categories WHERE event_id=?"), (event_id,))
            cur.execute(self._q("DELETE FROM events WHERE id=?"), (event_id,))
            return cur.rowcount > 0
