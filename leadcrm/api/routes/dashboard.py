from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from leadcrm.core.security import get_current_user, verify_admin
from leadcrm.database import get_db
from leadcrm.models.user import User
from leadcrm.schemas.dashboard import AdminDashboardStats, UserDashboardStats, UserPerformance
from leadcrm.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/admin", response_model=AdminDashboardStats)
def admin_dashboard(
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    return DashboardService(db).admin_stats()


@router.get("/me", response_model=UserDashboardStats)
def my_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DashboardService(db).user_stats(current_user)


@router.get("/users/{user_id}/performance", response_model=UserPerformance)
def user_performance(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Assigned vs converted leads for one profile"""
    return DashboardService(db).user_performance(user_id)
