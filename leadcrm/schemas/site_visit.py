from pydantic import BaseModel, Field
from uuid import UUID
from datetime import date, datetime, time
from typing import Optional


class SiteVisitCreate(BaseModel):
    scheduled_date: date
    scheduled_time: time
    notes: Optional[str] = Field(None, max_length=2000)


class SiteVisitOut(BaseModel):
    id: UUID
    lead_id: UUID
    scheduled_date: date
    scheduled_time: time
    notes: Optional[str] = None
    completed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SiteVisitLead(BaseModel):
    name: str
    email: Optional[str] = None
    mobile: str
    city: str
    assigned_to: Optional[UUID] = None

    class Config:
        from_attributes = True


class UpcomingSiteVisitOut(SiteVisitOut):
    lead: SiteVisitLead
