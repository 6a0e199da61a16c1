import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from leadcrm.core.exceptions import CRMError
from leadcrm.core.security import get_current_user
from leadcrm.database import get_db
from leadcrm.models.user import User
from leadcrm.schemas.task import DailyAgenda, TaskCreate, TaskOut
from leadcrm.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add a reminder on one of the caller's leads"""
    try:
        return TaskService(db).create_task(
            current_user,
            task_in.lead_id,
            task_in.task_type,
            task_in.task_date,
            task_in.task_time,
        )
    except CRMError:
        raise
    except Exception as e:
        logger.error(f"[TASK] Error creating task: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating task"
        )


@router.get("/agenda", response_model=DailyAgenda)
def daily_agenda(
    day: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Tasks, upcoming site visits and follow-ups for the day (default today)"""
    return TaskService(db).daily_agenda(current_user, day)


@router.patch("/{task_id}/toggle", response_model=TaskOut)
def toggle_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        return TaskService(db).toggle_task(task_id, current_user)
    except CRMError:
        raise
    except Exception as e:
        logger.error(f"[TASK] Error updating task: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating task"
        )
