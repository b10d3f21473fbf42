from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import now_epoch
from ..common.validators import optional_text, require_email, require_non_empty, require_winner_rank
from ..core.constants import UNSET
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .model import BulkCreateResult, NewParticipant, Participant
from .repository import ParticipantRepository

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A participant with this email already exists in this category"


class ParticipantDirectory:
    """Use case: own participant records of each category.

    Emails are stored exactly as given. Only the self-service check-in path folds
    case before looking a participant up, so callers writing through this class
    should normalise emails themselves if they want case-insensitive uniqueness.
    """

    def __init__(self, participants: ParticipantRepository):
        self._participants = participants

    # ---- reads -------------------------------------------------------------

    def list_participants(self, *, category_id: Optional[str] = None) -> Sequence[Participant]:
        if category_id:
            return self._participants.list_by_category(category_id)
        return self._participants.list_all()

    def get_participant(self, participant_id: str) -> Participant:
        participant = self._participants.get_by_id(participant_id)
        if not participant:
            raise NotFoundError("Participant not found")
        return participant

    def find_by_email(self, *, email: str, category_id: str) -> Optional[Participant]:
        """Exact lookup; absence is a normal ``None`` result."""
        return self._participants.get_by_email_and_category(email, category_id)

    # ---- writes ------------------------------------------------------------

    def create_participant(
        self,
        *,
        category_id: Any,
        email: Any,
        full_name: Any,
        school_institution: Any = None,
    ) -> Participant:
        if not category_id or not email or not full_name:
            raise ValidationError("Category ID, email, and full name are required")
        email = require_email(email)
        full_name = require_non_empty(full_name, "Full name")

        try:
            participant = self._insert(
                category_id=str(category_id),
                email=email,
                full_name=full_name,
                school_institution=optional_text(school_institution),
            )
        except ConflictError:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        except NotFoundError:
            raise NotFoundError("Category not found")
        return participant

    def bulk_create(self, category_id: str, records: Iterable[NewParticipant]) -> BulkCreateResult:
        """Insert records one at a time; a failing record never undoes earlier ones."""
        result = BulkCreateResult()
        for record in records:
            try:
                self._insert(
                    category_id=category_id,
                    email=record.email,
                    full_name=record.full_name,
                    school_institution=record.school_institution or None,
                )
                result.success += 1
            except ConflictError:
                result.failed += 1
                result.errors.append(f"Duplicate email: {record.email}")
            except DomainError as e:
                result.failed += 1
                result.errors.append(f"Failed to add {record.email}: {e}")

        logger.info(
            "Bulk import into category %s: %d added, %d failed",
            category_id,
            result.success,
            result.failed,
        )
        return result

    def update_participant(
        self,
        participant_id: str,
        *,
        email: Any = UNSET,
        full_name: Any = UNSET,
        school_institution: Any = UNSET,
        attendance_status: Any = UNSET,
        winner_rank: Any = UNSET,
    ) -> Participant:
        """Apply only the provided fields.

        Setting ``attendance_status`` to checked_in stamps ``checked_in_at`` with the
        current time, which gives the same end state as :meth:`check_in`.
        """
        current = self.get_participant(participant_id)
        fields: dict[str, object] = {}

        if email is not UNSET:
            fields["email"] = require_email(email)
        if full_name is not UNSET:
            fields["full_name"] = require_non_empty(full_name, "Full name")
        if school_institution is not UNSET:
            fields["school_institution"] = optional_text(school_institution)

        if attendance_status is not UNSET:
            try:
                status = AttendanceStatus(attendance_status)
            except ValueError:
                raise ValidationError("Attendance status must be 'pending' or 'checked_in'")
            if status == AttendanceStatus.CHECKED_IN:
                fields["attendance_status"] = status
                fields["checked_in_at"] = now_epoch()
            elif current.is_checked_in:
                raise ValidationError("A checked-in participant cannot be moved back to pending")

        if winner_rank is not UNSET:
            rank = require_winner_rank(winner_rank)
            if rank is not None:
                holders = [
                    p for p in self._participants.find_by_winner_rank(current.category_id, rank)
                    if p.id != participant_id
                ]
                if holders:
                    raise ConflictError(f"Rank {rank} is already assigned in this category")
            fields["winner_rank"] = rank

        try:
            updated = self._participants.update(participant_id, fields)
        except ConflictError:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        if not updated:
            raise NotFoundError("Participant not found")
        return updated

    def check_in(self, participant_id: str, *, now: Optional[int] = None) -> Participant:
        """Mark attendance unconditionally.

        Calling it again on a checked-in participant refreshes ``checked_in_at``.
        """
        participant = self._participants.check_in(participant_id, checked_in_at=now if now is not None else now_epoch())
        if not participant:
            raise NotFoundError("Participant not found")
        logger.info("Participant %s checked in (category %s)", participant.id, participant.category_id)
        return participant

    def delete_participant(self, participant_id: str) -> bool:
        return self._participants.delete_by_id(participant_id)

    def _insert(
        self,
        *,
        category_id: str,
        email: str,
        full_name: str,
        school_institution: Optional[str],
    ) -> Participant:
        return self._participants.create(
            participant_id=str(uuid.uuid4()),
            category_id=category_id,
            email=email,
            full_name=full_name,
            school_institution=school_institution,
            created_at=now_epoch(),
        )
