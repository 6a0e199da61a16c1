from sqlalchemy import Column, String, ForeignKey, Boolean, Date, Time, Uuid
from sqlalchemy.orm import relationship
from leadcrm.db.base import Base, TimestampMixin
import uuid


class Task(Base, TimestampMixin):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    lead_id = Column(Uuid, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    task_type = Column(String(50), nullable=False)  # call, meeting, site_visit, follow_up, documentation
    task_date = Column(Date, nullable=False, index=True)
    task_time = Column(Time, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)

    lead = relationship("Lead", back_populates="tasks")
    user = relationship("User", back_populates="tasks")
