from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import date, datetime, time
from typing import List, Optional

from leadcrm.schemas.lead import LeadContact
from leadcrm.schemas.site_visit import UpcomingSiteVisitOut


class TaskCreate(BaseModel):
    lead_id: UUID
    task_type: str = Field(..., max_length=50)
    task_date: date
    task_time: Optional[time] = None

    @field_validator("task_type")
    @classmethod
    def task_type_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class TaskLead(BaseModel):
    name: str
    email: Optional[str] = None
    mobile: str
    city: str

    class Config:
        from_attributes = True


class TaskOut(BaseModel):
    id: UUID
    lead_id: UUID
    user_id: UUID
    task_type: str
    task_date: date
    task_time: Optional[time] = None
    completed: bool
    created_at: datetime
    lead: Optional[TaskLead] = None

    class Config:
        from_attributes = True


class DailyAgenda(BaseModel):
    """Everything a user has on their plate today."""
    date: date
    tasks: List[TaskOut]
    site_visits: List[UpcomingSiteVisitOut]
    followups: List[LeadContact]
