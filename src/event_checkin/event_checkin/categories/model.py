from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Category:
    """Domain entity: a group of participants inside an event (target of a QR check-in link)."""

    id: str
    event_id: str
    name: str
    created_at: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CategoryWithStats:
    category: Category
    participant_count: int

    def to_dict(self) -> dict:
        data = self.category.to_dict()
        data["participantCount"] = self.participant_count
        return data
