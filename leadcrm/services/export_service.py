"""
Lead CSV Export

Fourteen fixed columns, every cell quoted, rows separated by "\n".
Embedded quotes are doubled so free-text notes cannot break the row.
"""
from __future__ import annotations

import csv
import io
import logging
from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from leadcrm.core.exceptions import EmptyResultError
from leadcrm.models.lead import Lead
from leadcrm.services.lead_filters import LeadFilter, apply_lead_filter, filter_leads

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "Name", "Email", "Mobile", "City", "Status", "Quality",
    "What to Buy", "Budget", "Professional Background", "Notes",
    "Follow-up Date", "Buying Date", "Assigned To", "Created At",
]

UNASSIGNED = "Unassigned"


def _text(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def lead_to_row(lead: Lead) -> List[str]:
    return [
        _text(lead.name),
        _text(lead.email),
        _text(lead.mobile),
        _text(lead.city),
        _text(lead.status),
        _text(lead.quality),
        _text(lead.what_to_buy),
        _text(lead.budget),
        _text(lead.professional_background),
        _text(lead.notes),
        _text(lead.followup_date),
        _text(lead.buying_date),
        lead.assignee_name or UNASSIGNED,
        lead.created_at.strftime("%Y-%m-%d") if lead.created_at else "",
    ]


def render_csv(leads: List[Lead]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for lead in leads:
        writer.writerow(lead_to_row(lead))
    # No trailing newline after the last row
    return buf.getvalue().rstrip("\n")


class LeadExportService:
    def __init__(self, db: Session):
        self.db = db

    def fetch(self, criteria: LeadFilter) -> List[Lead]:
        query = (
            apply_lead_filter(self.db.query(Lead), criteria)
            .options(joinedload(Lead.assignee))
            .order_by(desc(Lead.created_at))
        )
        leads = query.all()
        if criteria.has_budget_bounds:
            leads = filter_leads(leads, criteria)
        return leads

    def export_csv(self, criteria: LeadFilter) -> tuple[str, int]:
        """Returns (csv text, row count). Raises EmptyResultError when nothing matches."""
        leads = self.fetch(criteria)
        if not leads:
            raise EmptyResultError("No data found with the selected filters")
        logger.info(f"[EXPORT] {len(leads)} leads exported")
        return render_csv(leads), len(leads)
