"""
Site Visit Endpoints
Scheduling and completion each write the visit and the lead status in two
separate commits; a failed second step is reported with the step names.
"""
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from leadcrm.core.exceptions import CRMError
from leadcrm.core.security import get_current_user
from leadcrm.database import get_db
from leadcrm.models.user import User
from leadcrm.schemas.site_visit import SiteVisitCreate, SiteVisitOut, UpcomingSiteVisitOut
from leadcrm.services.site_visit_service import SiteVisitService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/site-visits/upcoming", response_model=List[UpcomingSiteVisitOut])
def upcoming_site_visits(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Open visits on the caller's leads for today and tomorrow"""
    return SiteVisitService(db).upcoming_for_user(current_user)


@router.get("/leads/{lead_id}/site-visits", response_model=List[SiteVisitOut])
def list_site_visits(
    lead_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return SiteVisitService(db).list_for_lead(lead_id, current_user)


@router.post(
    "/leads/{lead_id}/site-visits",
    response_model=SiteVisitOut,
    status_code=status.HTTP_201_CREATED,
)
def schedule_site_visit(
    lead_id: UUID,
    visit_in: SiteVisitCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return SiteVisitService(db).schedule_site_visit(
            lead_id,
            visit_in.scheduled_date,
            visit_in.scheduled_time,
            visit_in.notes,
            actor=current_user,
        )
    except CRMError:
        raise
    except Exception as e:
        logger.error(f"[SITE VISIT] Error scheduling site visit: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error scheduling site visit"
        )


@router.patch("/site-visits/{visit_id}/complete", response_model=SiteVisitOut)
def complete_site_visit(
    visit_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return SiteVisitService(db).complete_site_visit(visit_id, actor=current_user)
    except CRMError:
        raise
    except Exception as e:
        logger.error(f"[SITE VISIT] Error completing site visit: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error completing site visit"
        )
