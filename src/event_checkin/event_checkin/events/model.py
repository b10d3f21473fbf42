from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Domain entity: an event owning zero or more categories."""

    id: str
    name: str
    description: Optional[str]
    date: Optional[int]
    created_at: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EventWithStats:
    """Read-model for the dashboard event list."""

    event: Event
    category_count: int
    participant_count: int

    def to_dict(self) -> dict:
        data = self.event.to_dict()
        data["categoryCount"] = self.category_count
        data["participantCount"] = self.participant_count
        return data
