"""
Task Service
Ad-hoc reminders tied to a lead and an owning user, plus the daily agenda.
Task completion is independent of lead status.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import List, Optional

from sqlalchemy import nulls_last
from sqlalchemy.orm import Session, joinedload

from leadcrm.core.exceptions import NotFoundError
from leadcrm.models.lead import Lead
from leadcrm.models.task import Task
from leadcrm.models.user import User
from leadcrm.services.site_visit_service import SiteVisitService

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def create_task(
        self,
        user: User,
        lead_id: uuid.UUID,
        task_type: str,
        task_date: date,
        task_time: Optional[time] = None,
    ) -> Task:
        lead_query = self.db.query(Lead).filter(Lead.id == lead_id)
        if not user.is_admin:
            lead_query = lead_query.filter(Lead.assigned_to == user.id)
        if lead_query.first() is None:
            raise NotFoundError("Lead", lead_id)

        task = Task(
            lead_id=lead_id,
            user_id=user.id,
            task_type=task_type,
            task_date=task_date,
            task_time=task_time,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"[TASK] Created {task.id} ({task_type}) for user {user.id} on {task_date}")
        return task

    def toggle_task(self, task_id: uuid.UUID, actor: User) -> Task:
        """Flip completed/pending. Users may only toggle their own tasks."""
        query = self.db.query(Task).filter(Task.id == task_id)
        if not actor.is_admin:
            query = query.filter(Task.user_id == actor.id)
        task = query.first()
        if task is None:
            raise NotFoundError("Task", task_id)

        task.completed = not task.completed
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"[TASK] {task.id} completed={task.completed}")
        return task

    def tasks_for_day(self, user: User, day: Optional[date] = None) -> List[Task]:
        day = day or date.today()
        return (
            self.db.query(Task)
            .options(joinedload(Task.lead))
            .filter(Task.user_id == user.id, Task.task_date == day)
            .order_by(nulls_last(Task.task_time.asc()))
            .all()
        )

    def followups_for_day(self, user: User, day: Optional[date] = None) -> List[Lead]:
        day = day or date.today()
        return (
            self.db.query(Lead)
            .filter(Lead.assigned_to == user.id, Lead.followup_date == day)
            .order_by(Lead.name.asc())
            .all()
        )

    def daily_agenda(self, user: User, day: Optional[date] = None) -> dict:
        """Today's tasks, open site visits for today/tomorrow and today's follow-ups."""
        day = day or date.today()
        return {
            "date": day,
            "tasks": self.tasks_for_day(user, day),
            "site_visits": SiteVisitService(self.db).upcoming_for_user(user, day),
            "followups": self.followups_for_day(user, day),
        }
