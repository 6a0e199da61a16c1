"""
Site Visit Service

Scheduling and completing a visit each touch two rows: the visit and its
parent lead's status. The two writes are committed one after the other.
If the second fails the first stays committed and a TwoPhaseWriteError
names the failed phase so the caller can retry or repair.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from leadcrm.core.exceptions import NotFoundError, TwoPhaseWriteError
from leadcrm.models.lead import Lead, LeadStatus
from leadcrm.models.site_visit import SiteVisit
from leadcrm.models.user import User

logger = logging.getLogger(__name__)

PHASE_LEAD_STATUS = "lead_status"
PHASE_VISIT_INSERT = "site_visit_insert"
PHASE_VISIT_COMPLETE = "site_visit_complete"


class SiteVisitService:
    def __init__(self, db: Session):
        self.db = db

    def _lead(self, lead_id: uuid.UUID, actor: Optional[User]) -> Lead:
        query = self.db.query(Lead).filter(Lead.id == lead_id)
        if actor is not None and not actor.is_admin:
            query = query.filter(Lead.assigned_to == actor.id)
        lead = query.first()
        if lead is None:
            raise NotFoundError("Lead", lead_id)
        return lead

    def _visit(self, visit_id: uuid.UUID, actor: Optional[User]) -> SiteVisit:
        query = self.db.query(SiteVisit).join(Lead).filter(SiteVisit.id == visit_id)
        if actor is not None and not actor.is_admin:
            query = query.filter(Lead.assigned_to == actor.id)
        visit = query.first()
        if visit is None:
            raise NotFoundError("Site visit", visit_id)
        return visit

    def _run_phase(self, phase: str, committed: List[str], write) -> None:
        try:
            write()
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.error(f"[SITE VISIT] Phase '{phase}' failed after {committed}: {exc}")
            if not committed:
                raise
            raise TwoPhaseWriteError(phase, committed, exc) from exc
        committed.append(phase)

    def schedule_site_visit(
        self,
        lead_id: uuid.UUID,
        scheduled_date: date,
        scheduled_time: time,
        notes: Optional[str] = None,
        actor: Optional[User] = None,
    ) -> SiteVisit:
        """Mark the lead ``site_visit_scheduled``, then record the visit."""
        lead = self._lead(lead_id, actor)
        committed: List[str] = []
        visit = SiteVisit(
            lead_id=lead.id,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            notes=notes or None,
        )

        def set_status():
            lead.status = LeadStatus.SITE_VISIT_SCHEDULED

        self._run_phase(PHASE_LEAD_STATUS, committed, set_status)
        self._run_phase(PHASE_VISIT_INSERT, committed, lambda: self.db.add(visit))

        self.db.refresh(visit)
        logger.info(f"[SITE VISIT] Scheduled {visit.id} for lead {lead.id} on {scheduled_date} {scheduled_time}")
        return visit

    def complete_site_visit(self, visit_id: uuid.UUID, actor: Optional[User] = None) -> SiteVisit:
        """Mark the visit completed, then move its lead to ``site_visit_done``."""
        visit = self._visit(visit_id, actor)
        lead_id = visit.lead_id
        committed: List[str] = []

        def mark_completed():
            visit.completed = True

        def set_status():
            lead = self.db.query(Lead).filter(Lead.id == lead_id).first()
            if lead is None:
                raise NotFoundError("Lead", lead_id)
            lead.status = LeadStatus.SITE_VISIT_DONE

        self._run_phase(PHASE_VISIT_COMPLETE, committed, mark_completed)
        self._run_phase(PHASE_LEAD_STATUS, committed, set_status)

        self.db.refresh(visit)
        logger.info(f"[SITE VISIT] Completed {visit.id}; lead {lead_id} -> site_visit_done")
        return visit

    def list_for_lead(self, lead_id: uuid.UUID, actor: Optional[User] = None) -> List[SiteVisit]:
        lead = self._lead(lead_id, actor)
        return list(lead.site_visits)

    def upcoming_for_user(self, user: User, today: Optional[date] = None) -> List[SiteVisit]:
        """Open visits for the user's leads scheduled today or tomorrow."""
        today = today or date.today()
        return (
            self.db.query(SiteVisit)
            .join(Lead)
            .options(joinedload(SiteVisit.lead))
            .filter(
                Lead.assigned_to == user.id,
                SiteVisit.scheduled_date.in_([today, today + timedelta(days=1)]),
                SiteVisit.completed.is_(False),
            )
            .order_by(SiteVisit.scheduled_date, SiteVisit.scheduled_time)
            .all()
        )
