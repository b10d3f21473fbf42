from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..categories.model import Category, CategoryWithStats
from ..categories.repository import CategoryRepository
from ..common.datetime_utils import epoch_to_iso
from ..events.model import Event, EventWithStats
from ..events.repository import EventRepository
from ..participants.model import AttendanceStats
from ..participants.repository import ParticipantRepository


@dataclass(frozen=True)
class DashboardTotals:
    events: int
    categories: int
    participants: int
    checked_in: int

    def to_dict(self) -> dict:
        return {
            "events": self.events,
            "categories": self.categories,
            "participants": self.participants,
            "checkedIn": self.checked_in,
        }


ATTENDANCE_EXPORT_FIELDS = [
    "email",
    "full_name",
    "school_institution",
    "attendance_status",
    "checked_in_at",
    "winner_rank",
]


class StatsService:
    """Read-only aggregates for the organizer dashboard (no caching)."""

    def __init__(
        self,
        events: EventRepository,
        categories: CategoryRepository,
        participants: ParticipantRepository,
    ):
        self._events = events
        self._categories = categories
        self._participants = participants

    def participant_count_for_category(self, category_id: str) -> int:
        return self._participants.count_by_category(category_id)

    def category_count_for_event(self, event_id: str) -> int:
        return self._categories.count_by_event(event_id)

    def participant_count_for_event(self, event_id: str) -> int:
        return self._participants.count_by_event(event_id)

    def attendance_for_category(self, category_id: str) -> AttendanceStats:
        return self._participants.attendance_stats(category_id)

    def event_with_stats(self, event: Event) -> EventWithStats:
        return EventWithStats(
            event=event,
            category_count=self.category_count_for_event(event.id),
            participant_count=self.participant_count_for_event(event.id),
        )

    def events_with_stats(self, events: Optional[Sequence[Event]] = None) -> list[EventWithStats]:
        events = self._events.list_all() if events is None else events
        return [self.event_with_stats(e) for e in events]

    def categories_with_stats(self, categories: Sequence[Category]) -> list[CategoryWithStats]:
        return [
            CategoryWithStats(category=c, participant_count=self.participant_count_for_category(c.id))
            for c in categories
        ]

    def dashboard_totals(self) -> DashboardTotals:
        return DashboardTotals(
            events=self._events.count_all(),
            categories=self._categories.count_all(),
            participants=self._participants.count_all(),
            checked_in=self._participants.count_checked_in(),
        )

    def attendance_rows(self, category_id: str) -> list[dict]:
        """Flat rows for CSV/Excel attendance exports."""
        out_rows: list[dict] = []
        for p in sorted(self._participants.list_by_category(category_id), key=lambda p: p.full_name.lower()):
            out_rows.append(
                {
                    "email": p.email,
                    "full_name": p.full_name,
                    "school_institution": p.school_institution or "",
                    "attendance_status": p.attendance_status.value,
                    "checked_in_at": epoch_to_iso(p.checked_in_at) or "",
                    "winner_rank": p.winner_rank or "",
                }
            )
        return out_rows
