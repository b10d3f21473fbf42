"""Roster import: turn an uploaded CSV/Excel file into participant records.

The parser only looks at the bytes it is given. File selection, size limits
and the bulk insert are the caller's job.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Iterable, Iterator, Mapping, Optional

from openpyxl import load_workbook

from ..common.validators import is_valid_email
from ..core.constants import EMAIL_HEADERS, FULL_NAME_HEADERS, SCHOOL_HEADERS
from ..core.exceptions import ValidationError
from ..participants.model import NewParticipant

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = (".xlsx", ".xlsm")
TEXT_EXTENSIONS = (".csv", ".txt", "")


@dataclass
class RosterParseResult:
    records: list[NewParticipant] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """No valid row: worth reporting to the user, not a parser failure."""
        return not self.records


def _extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def is_supported_roster_file(filename: str) -> bool:
    ext = _extension(filename)
    return ext in EXCEL_EXTENSIONS or ext in TEXT_EXTENSIONS


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _first(row: Mapping[str, Any], aliases: Iterable[str]) -> str:
    for key in aliases:
        text = _cell_text(row.get(key))
        if text:
            return text
    return ""


def _is_blank(row: Mapping[str, Any]) -> bool:
    return all(not _cell_text(v).strip() for v in row.values())


class RosterImportParser:
    """Parse roster rows, tolerating the usual header spellings.

    Rows are numbered from 1, not counting the header or skipped rows. A bad row
    adds one message to ``errors`` and never aborts the rest of the file.

    CSV drops only empty lines, so a row of bare delimiters (``,,``) is numbered
    and reported. Spreadsheet rows with no value in any cell are skipped.
    """

    def parse(self, content: bytes | str, filename: str = "roster.csv") -> RosterParseResult:
        if not is_supported_roster_file(filename):
            raise ValidationError("Please upload a CSV or Excel (.xlsx) file")

        if _extension(filename) in EXCEL_EXTENSIONS:
            return self.parse_rows(self._iter_excel_rows(content))
        # csv.DictReader already drops empty lines
        return self.parse_rows(self._iter_csv_rows(content), skip_blank=False)

    def parse_rows(self, rows: Iterable[Mapping[str, Any]], *, skip_blank: bool = True) -> RosterParseResult:
        result = RosterParseResult()
        index = 0
        for row in rows:
            if skip_blank and _is_blank(row):
                continue
            index += 1

            error = self._row_error(index, row)
            if error:
                result.errors.append(error)
                continue

            school = _first(row, SCHOOL_HEADERS).strip()
            result.records.append(
                NewParticipant(
                    email=_first(row, EMAIL_HEADERS).strip(),
                    full_name=_first(row, FULL_NAME_HEADERS).strip(),
                    school_institution=school or None,
                )
            )

        logger.debug("Parsed roster: %d valid rows, %d errors", len(result.records), len(result.errors))
        return result

    @staticmethod
    def _row_error(index: int, row: Mapping[str, Any]) -> Optional[str]:
        email = _first(row, EMAIL_HEADERS)
        if not email:
            return f"Row {index}: Missing email"
        if not _first(row, FULL_NAME_HEADERS):
            return f"Row {index}: Missing full name"
        if not is_valid_email(email):
            return f"Row {index}: Invalid email format ({email})"
        return None

    @staticmethod
    def _iter_csv_rows(content: bytes | str) -> Iterator[Mapping[str, Any]]:
        if isinstance(content, bytes):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ValidationError("Roster file must be UTF-8 encoded text") from e
        else:
            text = content.lstrip("\ufeff")
        for row in csv.DictReader(io.StringIO(text, newline="")):
            # Cells beyond the header width land under a None key.
            yield {k: v for k, v in row.items() if k is not None}

    @staticmethod
    def _iter_excel_rows(content: bytes | str) -> Iterator[Mapping[str, Any]]:
        if isinstance(content, str):
            raise ValidationError("Excel roster must be uploaded as a binary file")
        try:
            wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise ValidationError(f"Failed to read Excel file: {e}") from e

        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            header_row = next(rows, None)
            if not header_row:
                return
            headers = [_cell_text(h).strip() for h in header_row]
            for values in rows:
                yield {h: v for h, v in zip(headers, values) if h}
        finally:
            wb.close()
