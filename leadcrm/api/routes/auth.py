"""
Authentication Endpoints
Profile signup, login, and current-profile lookup
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from leadcrm.core.exceptions import ValidationFailed
from leadcrm.core.security import create_access_token, get_current_user
from leadcrm.database import get_db
from leadcrm.models.user import User
from leadcrm.schemas.user import Token, UserCreate, UserLogin, UserResponse
from leadcrm.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    """Register a new sales user"""
    try:
        return UserService(db).register(user_in.email, user_in.full_name, user_in.password)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"Signup error: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating account"
        )


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get access token with profile info"""
    user = UserService(db).authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "user_id": user.id,
        "full_name": user.full_name or "",
        "role": user.role,
    }


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current profile"""
    return current_user
