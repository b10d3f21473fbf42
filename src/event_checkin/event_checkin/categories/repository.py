from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Category


class CategoryRepository(Protocol):
    def list_all(self) -> Sequence[Category]:
        raise NotImplementedError

    def list_by_event(self, event_id: str) -> Sequence[Category]:
        raise NotImplementedError

    def get_by_id(self, category_id: str) -> Optional[Category]:
        raise NotImplementedError

    def create(self, *, category_id: str, event_id: str, name: str, created_at: int) -> Category:
        """Raises NotFoundError when ``event_id`` does not reference an event."""

        raise NotImplementedError

    def update(self, category_id: str, fields: Mapping[str, object]) -> Optional[Category]:
        raise NotImplementedError

    def delete_by_id(self, category_id: str) -> bool:
        raise NotImplementedError

    def count_by_event(self, event_id: str) -> int:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
