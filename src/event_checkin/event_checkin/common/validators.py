from __future__ import annotations

from typing import Any, Optional

from ..core.constants import EMAIL_PATTERN, WINNER_RANKS
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def require_email(value: Any, field_name: str = "Email") -> str:
    """Validate the email pattern. The value is returned as given (no case folding)."""
    if value is None or (isinstance(value, str) and not value):
        raise ValidationError(f"{field_name} is required")
    if not is_valid_email(value):
        raise ValidationError(f"Invalid email format: {value}")
    return value


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def require_winner_rank(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("Winner rank must be 1, 2, 3 or null")
    try:
        rank = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Winner rank must be 1, 2, 3 or null")
    if rank not in WINNER_RANKS or str(rank) != str(value).strip():
        raise ValidationError("Winner rank must be 1, 2, 3 or null")
    return rank
