from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    """Repository interface for events.

    Deleting an event removes its categories and their participants.
    """

    def list_all(self) -> Sequence[Event]:
        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def create(
        self,
        *,
        event_id: str,
        name: str,
        description: Optional[str],
        date: Optional[int],
        created_at: int,
    ) -> Event:
        raise NotImplementedError

    def update(self, event_id: str, fields: Mapping[str, object]) -> Optional[Event]:
        raise NotImplementedError

    def delete_by_id(self, event_id: str) -> bool:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
