from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_epoch
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Category
from .repository import CategoryRepository

logger = logging.getLogger(__name__)


class CategoryService:
    """Use case: organizers manage the categories of an event."""

    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    def list_categories(self, *, event_id: Optional[str] = None) -> Sequence[Category]:
        if event_id:
            return self._categories.list_by_event(event_id)
        return self._categories.list_all()

    def get_category(self, category_id: str) -> Category:
        category = self._categories.get_by_id(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, *, event_id: Any, name: Any) -> Category:
        if not event_id or not isinstance(event_id, str):
            raise ValidationError("Event ID and name are required")
        name = require_non_empty(name, "Name")
        try:
            category = self._categories.create(
                category_id=str(uuid.uuid4()),
                event_id=event_id,
                name=name,
                created_at=now_epoch(),
            )
        except NotFoundError:
            raise NotFoundError("Event not found")
        logger.info("Created category %s (%s) in event %s", category.id, category.name, event_id)
        return category

    def rename_category(self, category_id: str, *, name: Any) -> Category:
        name = require_non_empty(name, "Name")
        category = self._categories.update(category_id, {"name": name})
        if not category:
            raise NotFoundError("Category not found")
        return category

    def delete_category(self, category_id: str) -> None:
        if not self._categories.delete_by_id(category_id):
            raise NotFoundError("Category not found")
        logger.info("Deleted category %s with its participants", category_id)
