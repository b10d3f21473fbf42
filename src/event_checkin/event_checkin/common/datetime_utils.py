from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date."""
    value = value.strip()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def date_to_epoch(value: date) -> int:
    """Midnight UTC of ``value`` as Unix epoch seconds."""
    return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())


def epoch_to_iso(value: Optional[int]) -> Optional[str]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc).isoformat()


def now_epoch() -> int:
    """Current time as Unix epoch seconds.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return int(time.time())
