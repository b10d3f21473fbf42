from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.exceptions import NotFoundError
from ..database.sql_repository import MySQLRepository, SQLiteRepository, SQLRepository
from .model import Category
from .repository import CategoryRepository


def _to_category(r: Dict[str, Any]) -> Category:
    return Category(
        id=str(r["id"]),
        event_id=str(r["event_id"]),
        name=r["name"],
        created_at=int(r["created_at"]),
    )


class SQLCategoryRepository(SQLRepository, CategoryRepository):
    def list_all(self) -> Sequence[Category]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT id, event_id, name, created_at
                FROM categories
                ORDER BY created_at DESC, {self.order_tiebreak} DESC
                """
            )
            return [_to_category(r) for r in self._fetchall(cur)]

    def list_by_event(self, event_id: str) -> Sequence[Category]:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q(
                    f"""
                    SELECT id, event_id, name, created_at
                    FROM categories
                    WHERE event_id=?
                    ORDER BY created_at DESC, {self.order_tiebreak} DESC
                    """
                ),
                (event_id,),
            )
            return [_to_category(r) for r in self._fetchall(cur)]

    def get_by_id(self, category_id: str) -> Optional[Category]:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q("SELECT id, event_id, name, created_at FROM categories WHERE id=?"),
                (category_id,),
            )
            r = self._fetchone(cur)
            return _to_category(r) if r else None

    def create(self, *, category_id: str, event_id: str, name: str, created_at: int) -> Category:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q("INSERT INTO categories(id, event_id, name, created_at) VALUES(?,?,?,?)"),
                (category_id, event_id, name, created_at),
            )
        return Category(id=category_id, event_id=event_id, name=name, created_at=created_at)

    def update(self, category_id: str, fields: Mapping[str, object]) -> Optional[Category]:
        if "name" in fields:
            with self._cursor() as (_, cur):
                cur.execute(self._q("UPDATE categories SET name=? WHERE id=?"), (fields["name"], category_id))
        return self.get_by_id(category_id)

    def delete_by_id(self, category_id: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(self._q("DELETE FROM categories WHERE id=?"), (category_id,))
            return cur.rowcount > 0

    def count_by_event(self, event_id: str) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM categories WHERE event_id=?", (event_id,))

    def count_all(self) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM categories")


class SQLiteCategoryRepository(SQLiteRepository, SQLCategoryRepository):
    """Embedded store: foreign keys are enforced by SQLite itself."""


class MySQLCategoryRepository(MySQLRepository, SQLCategoryRepository):
    def create(self, *, category_id: str, event_id: str, name: str, created_at: int) -> Category:
        # Referential check done here too, for servers without foreign keys.
        with self._cursor() as (_, cur):
            cur.execute(self._q("SELECT id FROM events WHERE id=?"), (event_id,))
            if not self._fetchone(cur):
                raise NotFoundError("Referenced record does not exist")
            cur.execute(
                self._q("INSERT INTO categories(id, event_id, name, created_at) VALUES(?,?,?,?)"),
                (category_id, event_id, name, created_at),
            )
        return Category(id=category_id, event_id=event_id, name=name, created_at=created_at)

    def delete_by_id(self, category_id: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(self._q("DELETE FROM participants WHERE category_id=?"), (category_id,))
            cur.execute(self._q("DELETE FROM categories WHERE id=?"), (category_id,))
            return cur.rowcount > 0
