from __future__ import annotations

from enum import Enum


class StorageBackend(str, Enum):
    """Which relational store backs the repositories for this process."""

    SQLITE = "sqlite"
    MYSQL = "mysql"


class AttendanceStatus(str, Enum):
    """Attendance state persisted on each participant."""

    PENDING = "pending"
    CHECKED_IN = "checked_in"


class CheckInState(str, Enum):
    """States of the self-service check-in flow as seen by the page."""

    UNIDENTIFIED = "unidentified"
    IDENTIFIED_PENDING = "identified_pending"
    IDENTIFIED_ALREADY_CHECKED = "identified_already_checked"
    CONFIRMED = "confirmed"
