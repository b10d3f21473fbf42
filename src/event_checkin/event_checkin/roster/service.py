from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..categories.repository import CategoryRepository
from ..core.exceptions import NotFoundError, ValidationError
from ..participants.model import BulkCreateResult
from ..participants.service import ParticipantDirectory
from .parser import RosterImportParser, RosterParseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterImportResult:
    parsed: RosterParseResult
    created: Optional[BulkCreateResult]

    def to_dict(self) -> dict:
        created = self.created or BulkCreateResult()
        return {
            "parsed": len(self.parsed.records),
            "parseErrors": list(self.parsed.errors),
            **created.to_dict(),
        }


class RosterImportService:
    """Use case: upload a roster file into a category (parse, then bulk create)."""

    def __init__(
        self,
        directory: ParticipantDirectory,
        categories: CategoryRepository,
        parser: Optional[RosterImportParser] = None,
    ):
        self._directory = directory
        self._categories = categories
        self._parser = parser or RosterImportParser()

    def import_file(self, *, category_id: str, content: bytes, filename: str) -> RosterImportResult:
        if not category_id:
            raise ValidationError("Category ID is required")
        if not self._categories.get_by_id(category_id):
            raise NotFoundError("Category not found")

        parsed = self._parser.parse(content, filename)
        if parsed.is_empty:
            logger.info("Roster %s has no valid rows (%d errors)", filename, len(parsed.errors))
            return RosterImportResult(parsed=parsed, created=None)

        created = self._directory.bulk_create(category_id, parsed.records)
        return RosterImportResult(parsed=parsed, created=created)
