from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..categories.model import Category
from ..categories.repository import CategoryRepository
from ..common.validators import is_valid_email
from ..core.enums import CheckInState
from ..core.exceptions import NotFoundError, ValidationError
from ..participants.model import Participant
from ..participants.service import ParticipantDirectory

logger = logging.getLogger(__name__)

PARTICIPANT_NOT_FOUND_MESSAGE = "Participant not found. Please check your email or contact the organizer."


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class CheckInLookup:
    """Result of phase 1: who the email belongs to and where the flow stands."""

    state: CheckInState
    participant: Participant
    category: Category

    def to_dict(self) -> dict:
        p = self.participant
        return {
            "state": self.state.value,
            "participant": {
                "id": p.id,
                "email": p.email,
                "full_name": p.full_name,
                "school_institution": p.school_institution,
                "attendance_status": p.attendance_status.value,
                "checked_in_at": p.checked_in_at,
            },
            "category": {"id": self.category.id, "name": self.category.name},
        }


class CheckInWorkflow:
    """Two-phase self-service check-in: identify by email, then confirm.

    Nothing is kept between the phases; the page carries the participant id from
    phase 1 into phase 2, and every phase-1 call re-reads storage.
    A participant found already checked in is never confirmed again through this
    workflow, so ``checked_in_at`` keeps its first value on this path.
    """

    def __init__(self, directory: ParticipantDirectory, categories: CategoryRepository):
        self._directory = directory
        self._categories = categories

    def identify(self, *, category_id: Any, email: Any) -> CheckInLookup:
        if not category_id or not email or not isinstance(email, str):
            raise ValidationError("Category ID and email are required")
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        participant = self._directory.find_by_email(email=email, category_id=str(category_id))
        if not participant:
            raise NotFoundError(PARTICIPANT_NOT_FOUND_MESSAGE)

        category = self._categories.get_by_id(str(category_id))
        if not category:
            raise NotFoundError("Category not found")

        state = (
            CheckInState.IDENTIFIED_ALREADY_CHECKED
            if participant.is_checked_in
            else CheckInState.IDENTIFIED_PENDING
        )
        return CheckInLookup(state=state, participant=participant, category=category)

    def confirm(self, *, participant_id: Any, now: Optional[int] = None) -> Participant:
        """Phase 2. ``participant_id`` is trusted context from phase 1.

        A repeat confirmation returns the participant unchanged.
        """
        if not participant_id:
            raise ValidationError("Participant ID is required")
        current = self._directory.get_participant(str(participant_id))
        if current.is_checked_in:
            logger.info("Participant %s already checked in, keeping %s", current.id, current.checked_in_at)
            return current
        participant = self._directory.check_in(current.id, now=now)
        logger.info("Self-service check-in confirmed for participant %s", participant.id)
        return participant

    @staticmethod
    def go_back() -> CheckInState:
        return CheckInState.UNIDENTIFIED
