"""
User Management (admin)
Profile roster with lead counts, and role changes.
"""
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from leadcrm.core.exceptions import CRMError
from leadcrm.core.security import verify_admin
from leadcrm.database import get_db
from leadcrm.models.user import User, UserRole
from leadcrm.schemas.lead import AssignableUser
from leadcrm.schemas.user import RoleUpdate, UserListResponse, UserResponse
from leadcrm.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    total, users = UserService(db).list_users(search, role)
    return {"success": True, "total": total, "users": users}


@router.get("/assignable", response_model=List[AssignableUser])
def assignable_users(
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Sales users a lead can be handed to"""
    return UserService(db).assignable_users()


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: UUID,
    role_in: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    try:
        return UserService(db).update_role(user_id, role_in.role)
    except CRMError:
        raise
    except Exception as e:
        logger.error(f"[USER] Error updating role for {user_id}: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating role"
        )
