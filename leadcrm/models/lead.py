"""
Lead Model - prospective buyers tracked through the sales pipeline
"""
from datetime import date
from typing import Optional
from sqlalchemy import String, Date, Text, Uuid, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid
import enum

from leadcrm.db.base import Base, TimestampMixin
from leadcrm.models.user import enum_values


class LeadStatus(str, enum.Enum):
    NEW = "new"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    SITE_VISIT_SCHEDULED = "site_visit_scheduled"
    SITE_VISIT_DONE = "site_visit_done"
    CONVERTED = "converted"
    LOST = "lost"


class LeadQuality(str, enum.Enum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class Lead(Base, TimestampMixin):
    """
    Lead model - the aggregate root. Site visits and tasks reference it by id.
    """
    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Contact
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    mobile: Mapped[str] = mapped_column(String(50), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Requirements, filled in while the lead is being worked
    what_to_buy: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    budget: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)  # free text: "50 lakhs", "1 crore"
    professional_background: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Lifecycle
    quality: Mapped[Optional[LeadQuality]] = mapped_column(
        SQLEnum(LeadQuality, name="lead_quality", values_callable=enum_values),
        nullable=True,
    )
    status: Mapped[LeadStatus] = mapped_column(
        SQLEnum(LeadStatus, name="lead_status", values_callable=enum_values),
        default=LeadStatus.NEW,
        nullable=False,
        index=True,
    )

    # Ownership
    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True
    )

    followup_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    buying_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Relationships
    assignee = relationship("User", back_populates="leads")
    site_visits = relationship(
        "SiteVisit",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="SiteVisit.scheduled_date",
    )
    tasks = relationship("Task", back_populates="lead", cascade="all, delete-orphan")

    @property
    def assignee_name(self) -> Optional[str]:
        return self.assignee.full_name if self.assignee else None
