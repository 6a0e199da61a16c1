"""
Dashboard aggregates - read-only counts over leads, profiles and tasks.
"""
from __future__ import annotations

import math
import uuid
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from leadcrm.core.exceptions import NotFoundError
from leadcrm.models.lead import Lead, LeadStatus
from leadcrm.models.task import Task
from leadcrm.models.user import User

NO_LEADS_LABEL = "No leads assigned"


def conversion_rate(assigned: int, converted: int) -> int:
    """Whole-percent conversion, halves rounded up. 0 when nothing is assigned."""
    if assigned <= 0:
        return 0
    return math.floor(converted / assigned * 100 + 0.5)


def conversion_label(assigned: int, converted: int) -> str:
    if assigned <= 0:
        return NO_LEADS_LABEL
    return f"{conversion_rate(assigned, converted)}% conversion rate"


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _lead_count(self, status: Optional[LeadStatus] = None, assigned_to: Optional[uuid.UUID] = None) -> int:
        query = self.db.query(Lead)
        if status is not None:
            query = query.filter(Lead.status == status)
        if assigned_to is not None:
            query = query.filter(Lead.assigned_to == assigned_to)
        return query.count()

    def _task_count(self, day: date, user_id: Optional[uuid.UUID] = None) -> int:
        query = self.db.query(Task).filter(Task.task_date == day)
        if user_id is not None:
            query = query.filter(Task.user_id == user_id)
        return query.count()

    def admin_stats(self, today: Optional[date] = None) -> dict:
        today = today or date.today()
        return {
            "total_leads": self._lead_count(),
            "new_leads": self._lead_count(LeadStatus.NEW),
            "in_progress_leads": self._lead_count(LeadStatus.IN_PROGRESS),
            "converted_leads": self._lead_count(LeadStatus.CONVERTED),
            "total_users": self.db.query(User).count(),
            "today_tasks": self._task_count(today),
        }

    def user_stats(self, user: User, today: Optional[date] = None) -> dict:
        today = today or date.today()
        return {
            "assigned_leads": self._lead_count(assigned_to=user.id),
            "in_progress_leads": self._lead_count(LeadStatus.IN_PROGRESS, user.id),
            "converted_leads": self._lead_count(LeadStatus.CONVERTED, user.id),
            "today_tasks": self._task_count(today, user.id),
        }

    def lead_counts_for(self, user_id: uuid.UUID) -> dict:
        return {
            "assigned_leads": self._lead_count(assigned_to=user_id),
            "in_progress_leads": self._lead_count(LeadStatus.IN_PROGRESS, user_id),
            "converted_leads": self._lead_count(LeadStatus.CONVERTED, user_id),
        }

    def user_performance(self, user_id: uuid.UUID) -> dict:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User", user_id)
        assigned = self._lead_count(assigned_to=user_id)
        converted = self._lead_count(LeadStatus.CONVERTED, user_id)
        return {
            "user_id": user.id,
            "user_name": user.full_name or "Unknown",
            "assigned_leads": assigned,
            "converted_leads": converted,
            "conversion_rate": conversion_rate(assigned, converted),
            "conversion_label": conversion_label(assigned, converted),
        }
