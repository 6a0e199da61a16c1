"""
Lead Service
Creation, assignment, status changes, updates and role-scoped listing.

Status is constrained to the LeadStatus taxonomy but transitions are not:
an authorised caller may move a lead to any status from any status.
"""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from leadcrm.core.exceptions import NotFoundError
from leadcrm.models.lead import Lead, LeadStatus
from leadcrm.models.user import User
from leadcrm.schemas.lead import LeadCreate, LeadUpdate
from leadcrm.services.lead_filters import LeadFilter, apply_lead_filter, filter_leads

logger = logging.getLogger(__name__)


class LeadService:
    def __init__(self, db: Session):
        self.db = db

    # ── Lookup ────────────────────────────────────────────────────────────────

    def _scoped(self, actor: Optional[User]) -> Query:
        """Admins see every lead; users only the ones assigned to them."""
        query = self.db.query(Lead)
        if actor is not None and not actor.is_admin:
            query = query.filter(Lead.assigned_to == actor.id)
        return query

    def get_lead(self, lead_id: uuid.UUID, actor: Optional[User] = None) -> Lead:
        lead = self._scoped(actor).filter(Lead.id == lead_id).first()
        if lead is None:
            raise NotFoundError("Lead", lead_id)
        return lead

    def list_leads(
        self,
        actor: User,
        criteria: Optional[LeadFilter] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[int, List[Lead]]:
        """
        Newest first. Returns (total matching, page).

        Budget bounds cannot be expressed in SQL, so when present the
        page is cut after the in-memory pass.
        """
        criteria = criteria or LeadFilter()
        filtered = apply_lead_filter(self._scoped(actor), criteria)
        query = filtered.options(
            joinedload(Lead.assignee),
            selectinload(Lead.site_visits),
        ).order_by(desc(Lead.created_at))

        if criteria.has_budget_bounds:
            matching = filter_leads(query.all(), criteria)
            end = skip + limit if limit is not None else None
            return len(matching), matching[skip:end]

        total = filtered.count()
        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return total, query.all()

    def distinct_cities(self) -> List[str]:
        rows = (
            self.db.query(Lead.city)
            .filter(Lead.city.isnot(None))
            .distinct()
            .order_by(Lead.city)
            .all()
        )
        return [city for (city,) in rows]

    # ── Creation ──────────────────────────────────────────────────────────────

    def create_lead(self, payload: LeadCreate) -> Lead:
        """Admin entry: unassigned, status ``new``."""
        lead = Lead(**payload.model_dump(), status=LeadStatus.NEW, assigned_to=None)
        return self._insert(lead)

    def create_lead_for_user(self, user: User, payload: LeadCreate) -> Lead:
        """User entry: the lead is assigned to its creator with status ``assigned``."""
        lead = Lead(**payload.model_dump(), status=LeadStatus.ASSIGNED, assigned_to=user.id)
        return self._insert(lead)

    def _insert(self, lead: Lead) -> Lead:
        self.db.add(lead)
        self.db.commit()
        self.db.refresh(lead)
        logger.info(f"[LEAD] Created {lead.id} status={lead.status.value} assigned_to={lead.assigned_to}")
        return lead

    # ── Mutation ──────────────────────────────────────────────────────────────

    def update_lead(self, lead_id: uuid.UUID, payload: LeadUpdate, actor: Optional[User] = None) -> Lead:
        lead = self.get_lead(lead_id, actor)
        for field, value in payload.changes().items():
            setattr(lead, field, value)
        self.db.commit()
        self.db.refresh(lead)
        logger.info(f"[LEAD] Updated {lead.id}")
        return lead

    def update_status(self, lead_id: uuid.UUID, status: LeadStatus, actor: Optional[User] = None) -> Lead:
        lead = self.get_lead(lead_id, actor)
        previous = lead.status
        lead.status = LeadStatus(status)
        self.db.commit()
        self.db.refresh(lead)
        logger.info(f"[LEAD] {lead.id} status {previous.value} -> {lead.status.value}")
        return lead

    def assign_lead(self, lead_id: uuid.UUID, user_id: uuid.UUID) -> Lead:
        """
        Hand a lead to a sales user and mark it ``in_progress``.
        Any previous assignee is overwritten without a trace.
        """
        lead = self.get_lead(lead_id)
        assignee = self.db.query(User).filter(User.id == user_id).first()
        if assignee is None:
            raise NotFoundError("User", user_id)

        lead.assigned_to = assignee.id
        lead.status = LeadStatus.IN_PROGRESS
        self.db.commit()
        self.db.refresh(lead)
        logger.info(f"[LEAD] Assigned {lead.id} to {assignee.id}")
        return lead

    def delete_lead(self, lead_id: uuid.UUID) -> None:
        lead = self.get_lead(lead_id)
        self.db.delete(lead)
        self.db.commit()
        logger.info(f"[LEAD] Deleted {lead_id}")
