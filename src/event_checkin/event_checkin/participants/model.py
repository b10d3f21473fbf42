from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Participant:
    """Domain entity: a registrant whose attendance is tracked within one category.

    Note: ``checked_in_at`` is set if and only if ``attendance_status`` is CHECKED_IN.
    """

    id: str
    category_id: str
    email: str
    full_name: str
    school_institution: Optional[str]
    attendance_status: AttendanceStatus
    checked_in_at: Optional[int]
    winner_rank: Optional[int]
    created_at: int

    @property
    def is_checked_in(self) -> bool:
        return self.attendance_status == AttendanceStatus.CHECKED_IN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "email": self.email,
            "full_name": self.full_name,
            "school_institution": self.school_institution,
            "attendance_status": self.attendance_status.value,
            "checked_in_at": self.checked_in_at,
            "winner_rank": self.winner_rank,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class NewParticipant:
    """Input record for bulk creation (already validated by the caller)."""

    email: str
    full_name: str
    school_institution: Optional[str] = None


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    checked_in: int = 0
    pending: int = 0

    def to_dict(self) -> dict:
        return {"total": self.total, "checkedIn": self.checked_in, "pending": self.pending}


@dataclass
class BulkCreateResult:
    """Outcome of a best-effort bulk insert: partial success is expected."""

    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"success": self.success, "failed": self.failed, "errors": list(self.errors)}
