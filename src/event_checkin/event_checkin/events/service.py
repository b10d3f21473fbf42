from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Optional

from ..common.datetime_utils import date_to_epoch, epoch_to_iso, now_epoch, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import UNSET
from ..core.exceptions import NotFoundError, ValidationError
from .model import Event
from .repository import EventRepository

logger = logging.getLogger(__name__)


def _parse_event_date(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("Invalid event date")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"Invalid event date: {value}")
        try:
            epoch_to_iso(int(value))
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f"Event date out of range: {value}")
        return int(value)
    try:
        return date_to_epoch(parse_iso_date(str(value)))
    except ValueError:
        raise ValidationError(f"Invalid event date: {value}")


class EventService:
    """Use case: organizers manage events."""

    def __init__(self, events: EventRepository):
        self._events = events

    def list_events(self):
        return self._events.list_all()

    def get_event(self, event_id: str) -> Event:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, *, name: Any, description: Any = None, date: Any = None) -> Event:
        name = require_non_empty(name, "Name")
        event = self._events.create(
            event_id=str(uuid.uuid4()),
            name=name,
            description=optional_text(description),
            date=_parse_event_date(date),
            created_at=now_epoch(),
        )
        logger.info("Created event %s (%s)", event.id, event.name)
        return event

    def update_event(self, event_id: str, *, name: Any = UNSET, description: Any = UNSET, date: Any = UNSET) -> Event:
        fields: dict[str, object] = {}
        if name is not UNSET:
            fields["name"] = require_non_empty(name, "Name")
        if description is not UNSET:
            fields["description"] = optional_text(description)
        if date is not UNSET:
            fields["date"] = _parse_event_date(date)

        event = self._events.update(event_id, fields)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def delete_event(self, event_id: str) -> None:
        if not self._events.delete_by_id(event_id):
            raise NotFoundError("Event not found")
        logger.info("Deleted event %s with its categories and participants", event_id)
