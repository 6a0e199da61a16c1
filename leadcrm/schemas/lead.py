"""
Pydantic schemas for leads.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from leadcrm.models.lead import LeadQuality, LeadStatus
from leadcrm.schemas.site_visit import SiteVisitOut


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class LeadCreate(BaseModel):
    """Manual lead entry. Name, mobile and city are mandatory."""
    name: str = Field(..., max_length=255)
    mobile: str = Field(..., max_length=50)
    city: str = Field(..., max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    what_to_buy: Optional[str] = Field(None, max_length=255)
    budget: Optional[str] = Field(None, max_length=100)
    professional_background: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    quality: Optional[LeadQuality] = None

    @field_validator("name", "mobile", "city")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator(
        "email", "what_to_buy", "budget", "professional_background", "notes", "quality",
        mode="before",
    )
    @classmethod
    def empty_as_null(cls, v):
        return _blank_to_none(v)


class LeadUpdate(BaseModel):
    """
    Partial update. Only fields present in the request are written;
    an empty string clears an optional field.
    """
    name: Optional[str] = Field(None, max_length=255)
    mobile: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    status: Optional[LeadStatus] = None
    quality: Optional[LeadQuality] = None
    what_to_buy: Optional[str] = Field(None, max_length=255)
    budget: Optional[str] = Field(None, max_length=100)
    professional_background: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    followup_date: Optional[date] = None
    buying_date: Optional[date] = None

    @field_validator("name", "mobile", "city")
    @classmethod
    def required_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("must not be null")
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator(
        "email", "quality", "what_to_buy", "budget", "professional_background",
        "notes", "followup_date", "buying_date",
        mode="before",
    )
    @classmethod
    def empty_as_null(cls, v):
        return _blank_to_none(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class LeadStatusUpdate(BaseModel):
    status: LeadStatus


class LeadAssign(BaseModel):
    user_id: uuid.UUID


class LeadOut(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    mobile: str
    city: str
    status: LeadStatus
    quality: Optional[LeadQuality] = None
    what_to_buy: Optional[str] = None
    budget: Optional[str] = None
    professional_background: Optional[str] = None
    notes: Optional[str] = None
    followup_date: Optional[date] = None
    buying_date: Optional[date] = None
    assigned_to: Optional[uuid.UUID] = None
    assignee_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LeadDetailOut(LeadOut):
    site_visits: List[SiteVisitOut] = []


class LeadListResponse(BaseModel):
    success: bool = True
    total: int
    leads: List[LeadDetailOut]


class LeadContact(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    mobile: str
    city: str
    status: LeadStatus
    followup_date: Optional[date] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class AssignableUser(BaseModel):
    id: uuid.UUID
    full_name: str

    class Config:
        from_attributes = True


class FilterOptions(BaseModel):
    users: List[AssignableUser]
    cities: List[str]


class ImportResult(BaseModel):
    success: bool = True
    imported: int
    skipped: int
    message: str
