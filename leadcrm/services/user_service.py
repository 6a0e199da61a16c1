"""
Profile management: registration, lookup, role changes and the admin roster.
"""
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from leadcrm.core.exceptions import NotFoundError, ValidationFailed
from leadcrm.core.security import get_password_hash, verify_password
from leadcrm.models.user import User, UserRole
from leadcrm.services.dashboard_service import DashboardService
from leadcrm.services.lead_filters import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, email: str, full_name: str, password: str) -> User:
        """New profiles always start as plain users; admins promote them."""
        if self.db.query(User).filter(User.email == email).first():
            raise ValidationFailed("Email already registered", field="email")
        user = User(
            id=uuid.uuid4(),
            email=email,
            full_name=full_name.strip(),
            hashed_password=get_password_hash(password),
            role=UserRole.USER,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"[USER] Registered {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    def assignable_users(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.USER)
            .order_by(User.full_name)
            .all()
        )

    def list_users(self, search: Optional[str] = None, role: Optional[UserRole] = None) -> Tuple[int, List[dict]]:
        """Every profile, newest first, with its lead counts."""
        query = self.db.query(User)
        if search and search.strip():
            pattern = contains_pattern(search.strip())
            query = query.filter(or_(
                User.full_name.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
            ))
        if role is not None:
            query = query.filter(User.role == role)

        users = query.order_by(desc(User.created_at)).all()
        dashboard = DashboardService(self.db)
        roster = []
        for user in users:
            row = {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "role": user.role,
                "created_at": user.created_at,
            }
            row.update(dashboard.lead_counts_for(user.id))
            roster.append(row)
        return len(roster), roster

    def update_role(self, user_id: uuid.UUID, role: UserRole) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User", user_id)
        user.role = UserRole(role)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"[USER] {user.id} role -> {user.role.value}")
        return user
