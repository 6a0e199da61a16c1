"""
Profile Model - sales team members and administrators
"""
from enum import Enum
from sqlalchemy import String, Enum as SQLEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from leadcrm.db.base import Base, TimestampMixin


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


def enum_values(enum_cls):
    """Persist enum values ("in_progress") rather than member names."""
    return [member.value for member in enum_cls]


class User(Base, TimestampMixin):
    """
    User profile.

    Admins see and manage every lead; users work the leads assigned to them.
    """
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", values_callable=enum_values),
        default=UserRole.USER,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=True)

    leads = relationship("Lead", back_populates="assignee")
    tasks = relationship("Task", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
