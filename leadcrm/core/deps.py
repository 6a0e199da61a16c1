from datetime import date
from typing import Optional

from fastapi import Query
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from leadcrm.core.config import settings
from leadcrm.services.lead_filters import LeadFilter


def lead_filter_params(
    search: Optional[str] = Query(None, description="Matches name, email or city"),
    status: Optional[str] = Query(None, description="Lead status or 'all'"),
    quality: Optional[str] = Query(None, description="hot, warm, cold or 'all'"),
    city: Optional[str] = None,
    assigned_to: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    what_to_buy: Optional[str] = None,
    budget_min: Optional[float] = Query(None, ge=0, description="Lakhs"),
    budget_max: Optional[float] = Query(None, ge=0, description="Lakhs"),
) -> LeadFilter:
    """Build a LeadFilter from query parameters; bad enum or id values become a 422."""
    try:
        return LeadFilter(
            search=search,
            status=status,
            quality=quality,
            city=city,
            assigned_to=assigned_to,
            date_from=date_from,
            date_to=date_to,
            what_to_buy=what_to_buy,
            budget_min=budget_min,
            budget_max=budget_max,
        )
    except ValidationError as e:
        raise RequestValidationError(jsonable_encoder(e.errors(include_url=False, include_context=False)))


def page_params(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
) -> dict:
    limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return {"skip": skip, "limit": limit}
