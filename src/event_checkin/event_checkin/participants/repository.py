from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendanceStats, Participant


class ParticipantRepository(Protocol):
    """Repository interface for participants.

    Note (DIP): services depend on this interface, never on a concrete database.
    ``(category_id, email)`` is unique; a duplicate insert raises ConflictError and a
    missing category raises NotFoundError. Lookups return None instead of raising.
    """

    def list_all(self) -> Sequence[Participant]:
        raise NotImplementedError

    def list_by_category(self, category_id: str) -> Sequence[Participant]:
        raise NotImplementedError

    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        raise NotImplementedError

    def get_by_email_and_category(self, email: str, category_id: str) -> Optional[Participant]:
        """Exact (case-sensitive) match; callers normalise the email first."""

        raise NotImplementedError

    def find_by_winner_rank(self, category_id: str, winner_rank: int) -> Sequence[Participant]:
        raise NotImplementedError

    def create(
        self,
        *,
        participant_id: str,
        category_id: str,
        email: str,
        full_name: str,
        school_institution: Optional[str],
        created_at: int,
    ) -> Participant:
        raise NotImplementedError

    def update(self, participant_id: str, fields: Mapping[str, object]) -> Optional[Participant]:
        raise NotImplementedError

    def check_in(self, participant_id: str, *, checked_in_at: int) -> Optional[Participant]:
        raise NotImplementedError

    def delete_by_id(self, participant_id: str) -> bool:
        raise NotImplementedError

    def count_by_category(self, category_id: str) -> int:
        raise NotImplementedError

    def count_by_event(self, event_id: str) -> int:
        raise NotImplementedError

    def attendance_stats(self, category_id: str) -> AttendanceStats:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_checked_in(self) -> int:
        raise NotImplementedError
