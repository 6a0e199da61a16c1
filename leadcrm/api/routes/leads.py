"""
Lead Endpoints
Listing, entry, assignment, status changes, bulk import and CSV export.
Admins work across every lead; sales users only see leads assigned to them.
"""
import io
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from leadcrm.core.config import settings
from leadcrm.core.deps import lead_filter_params, page_params
from leadcrm.core.exceptions import CRMError, EmptyResultError
from leadcrm.core.security import get_current_user, verify_admin
from leadcrm.database import get_db
from leadcrm.models.user import User
from leadcrm.schemas.lead import (
    FilterOptions,
    ImportResult,
    LeadAssign,
    LeadCreate,
    LeadDetailOut,
    LeadListResponse,
    LeadOut,
    LeadStatusUpdate,
    LeadUpdate,
)
from leadcrm.services.export_service import LeadExportService
from leadcrm.services.import_service import LeadImportService
from leadcrm.services.lead_filters import LeadFilter
from leadcrm.services.lead_service import LeadService
from leadcrm.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _backend_failure(db: Session, action: str, error: Exception) -> HTTPException:
    logger.error(f"[LEADS] Error {action}: {error}")
    db.rollback()
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error {action}"
    )


# ==================== LISTING ====================


@router.get("", response_model=LeadListResponse)
def list_leads(
    criteria: LeadFilter = Depends(lead_filter_params),
    page: dict = Depends(page_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Leads visible to the caller, newest first"""
    total, leads = LeadService(db).list_leads(current_user, criteria, **page)
    return {"success": True, "total": total, "leads": leads}


@router.get("/filter-options", response_model=FilterOptions)
def filter_options(
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Assignable users and known cities for the filter bar"""
    return {
        "users": UserService(db).assignable_users(),
        "cities": LeadService(db).distinct_cities(),
    }


@router.get("/export")
def export_leads(
    criteria: LeadFilter = Depends(lead_filter_params),
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Download the filtered leads as CSV"""
    try:
        content, count = LeadExportService(db).export_csv(criteria)
    except EmptyResultError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    filename = settings.EXPORT_FILENAME
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8")),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Total-Count": str(count),
        },
    )


@router.post("/import", response_model=ImportResult)
async def import_leads(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """
    Bulk import from an .xlsx workbook.
    Expected columns after the header row: Name, Email, Mobile, City.
    """
    # One byte past the cap is enough to reject an oversized upload
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    try:
        summary = LeadImportService(db).import_workbook(file.filename, content)
    except EmptyResultError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except CRMError:
        raise
    except Exception as e:
        raise _backend_failure(db, "importing leads", e)

    return {
        "success": True,
        "imported": summary.imported,
        "skipped": summary.skipped,
        "message": f"Successfully imported {summary.imported} leads",
    }


# ==================== SINGLE LEAD ====================


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
def create_lead(
    lead_in: LeadCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Admin entries start unassigned as ``new``; a sales user's own entry
    is assigned to them as ``assigned``.
    """
    service = LeadService(db)
    try:
        if current_user.is_admin:
            return service.create_lead(lead_in)
        return service.create_lead_for_user(current_user, lead_in)
    except Exception as e:
        raise _backend_failure(db, "creating lead", e)


@router.get("/{lead_id}", response_model=LeadDetailOut)
def get_lead(
    lead_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return LeadService(db).get_lead(lead_id, current_user)


@router.put("/{lead_id}", response_model=LeadOut)
def update_lead(
    lead_id: UUID,
    lead_update: LeadUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update only the fields present in the request"""
    try:
        return LeadService(db).update_lead(lead_id, lead_update, current_user)
    except CRMError:
        raise
    except Exception as e:
        raise _backend_failure(db, "updating lead", e)


@router.patch("/{lead_id}/status", response_model=LeadOut)
def update_lead_status(
    lead_id: UUID,
    status_in: LeadStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return LeadService(db).update_status(lead_id, status_in.status, current_user)
    except CRMError:
        raise
    except Exception as e:
        raise _backend_failure(db, "updating lead status", e)


@router.patch("/{lead_id}/assign", response_model=LeadOut)
def assign_lead(
    lead_id: UUID,
    assignment: LeadAssign,
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Hand a lead to a sales user; status becomes in_progress"""
    try:
        return LeadService(db).assign_lead(lead_id, assignment.user_id)
    except CRMError:
        raise
    except Exception as e:
        raise _backend_failure(db, "assigning lead", e)


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(
    lead_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(verify_admin)
):
    """Delete a lead together with its site visits and tasks"""
    try:
        LeadService(db).delete_lead(lead_id)
    except CRMError:
        raise
    except Exception as e:
        raise _backend_failure(db, "deleting lead", e)
    return None
