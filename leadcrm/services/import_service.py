"""
Bulk Lead Import

Reads the first worksheet of an .xlsx workbook. Row 1 is a header and is
ignored; data rows carry four columns in fixed order:

    Name | Email | Mobile | City

A row is kept only when name, mobile and city are all non-empty after
trimming. Rejected rows are dropped without per-row reporting.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from leadcrm.core.config import settings
from leadcrm.core.exceptions import EmptyResultError, ValidationFailed
from leadcrm.models.lead import Lead, LeadStatus

logger = logging.getLogger(__name__)

COLUMNS = ("name", "email", "mobile", "city")
SUPPORTED_EXTENSIONS = (".xlsx",)


@dataclass
class ImportRow:
    name: str
    email: Optional[str]
    mobile: str
    city: str


@dataclass
class ImportSummary:
    imported: int
    skipped: int


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    # Phone numbers typed into Excel come back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_rows(rows: Iterable[Sequence[Any]]) -> tuple[List[ImportRow], int]:
    """
    Turn raw sheet rows (header included) into accepted ImportRows.
    Returns (accepted, skipped count).
    """
    accepted: List[ImportRow] = []
    skipped = 0
    for index, row in enumerate(rows):
        if index == 0:
            continue
        cells = [_cell_text(row[i]) if i < len(row) else "" for i in range(len(COLUMNS))]
        if not any(cells):
            continue
        name, email, mobile, city = cells
        if not (name and mobile and city):
            skipped += 1
            continue
        accepted.append(ImportRow(name=name, email=email or None, mobile=mobile, city=city))
    return accepted, skipped


def read_workbook_rows(content: bytes) -> List[tuple]:
    """All rows of the first worksheet as value tuples."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        logger.warning(f"[IMPORT] Unreadable workbook: {exc}")
        raise ValidationFailed("Could not read the spreadsheet. Upload a valid .xlsx file.", field="file")
    try:
        sheet = workbook.worksheets[0]
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


class LeadImportService:
    def __init__(self, db: Session):
        self.db = db

    def import_workbook(self, filename: str, content: bytes) -> ImportSummary:
        if not (filename or "").lower().endswith(SUPPORTED_EXTENSIONS):
            raise ValidationFailed("Only .xlsx workbooks are supported", field="file")
        if len(content) > settings.MAX_UPLOAD_BYTES:
            raise ValidationFailed(
                f"File too large; limit is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB", field="file"
            )

        accepted, skipped = parse_rows(read_workbook_rows(content))
        if not accepted:
            raise EmptyResultError("No valid leads found in the file", {"skipped": skipped})

        self.db.add_all(
            Lead(
                name=row.name,
                email=row.email,
                mobile=row.mobile,
                city=row.city,
                status=LeadStatus.NEW,
                assigned_to=None,
            )
            for row in accepted
        )
        self.db.commit()
        logger.info(f"[IMPORT] {filename}: {len(accepted)} imported, {skipped} skipped")
        return ImportSummary(imported=len(accepted), skipped=skipped)
