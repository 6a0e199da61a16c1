"""
Site Visit Model - scheduled property viewings for a lead
"""
from datetime import date, time
from typing import Optional
from sqlalchemy import Boolean, Date, Time, Text, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from leadcrm.db.base import Base, TimestampMixin


class SiteVisit(Base, TimestampMixin):
    __tablename__ = "site_visits"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )

    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    scheduled_time: Mapped[time] = mapped_column(Time, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    lead = relationship("Lead", back_populates="site_visits")
