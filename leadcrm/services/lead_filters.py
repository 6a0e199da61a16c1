"""
Lead filtering and search.

A LeadFilter is a conjunction of per-field constraints. The sentinel
``"all"`` and the empty string both mean "no constraint" for a field.
The same criteria can be evaluated in memory over fetched leads
(``LeadFilter.matches`` / ``filter_leads``) or pushed down into a
SQLAlchemy query (``apply_lead_filter``). Budget bounds compare against
a number parsed out of free text, so they are always evaluated in Python.
"""
from __future__ import annotations

import re
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from pydantic import BaseModel, field_validator
from sqlalchemy import or_
from sqlalchemy.orm import Query

from leadcrm.models.lead import Lead, LeadQuality, LeadStatus

ALL = "all"

# Budget amounts are normalised to lakhs
_CRORE_IN_LAKHS = 100
_BUDGET_RE = re.compile(
    r"(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>crores?|cr|lakhs?|lacs?|lac|l|k|thousand)?\b",
    re.IGNORECASE,
)


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Substring LIKE pattern with the user's own % and _ taken literally."""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _sentinel_to_none(v):
    if v is None:
        return None
    if isinstance(v, str) and (not v.strip() or v.strip().lower() == ALL):
        return None
    return v


def parse_budget_lakhs(budget: Optional[str]) -> Optional[float]:
    """
    Extract a budget in lakhs from free text.

    "50 lakhs" -> 50, "1.5 Cr" -> 150, "75" -> 75. Returns None when no
    number is present. For ranges ("40-50 lakhs") the first amount wins.
    """
    if not budget:
        return None
    match = _BUDGET_RE.search(budget.replace(",", ""))
    if not match:
        return None
    amount = float(match.group("amount"))
    unit = (match.group("unit") or "").lower()
    if unit.startswith("cr"):
        return amount * _CRORE_IN_LAKHS
    if unit in ("k", "thousand"):
        return amount / 100
    return amount


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


class LeadFilter(BaseModel):
    search: Optional[str] = None
    status: Optional[LeadStatus] = None
    quality: Optional[LeadQuality] = None
    city: Optional[str] = None
    assigned_to: Optional[uuid.UUID] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    what_to_buy: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def drop_sentinels(cls, v):
        return _sentinel_to_none(v)

    @field_validator("search", "city", "what_to_buy")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v

    # ── Derived bounds ────────────────────────────────────────────────────

    @property
    def created_from(self) -> Optional[datetime]:
        """Inclusive lower bound: start of ``date_from``."""
        if self.date_from is None:
            return None
        return datetime.combine(self.date_from, time.min)

    @property
    def created_before(self) -> Optional[datetime]:
        """Exclusive upper bound: midnight after ``date_to``, so all of ``date_to`` is included."""
        if self.date_to is None:
            return None
        return datetime.combine(self.date_to + timedelta(days=1), time.min)

    @property
    def has_budget_bounds(self) -> bool:
        return self.budget_min is not None or self.budget_max is not None

    # ── In-memory predicate ───────────────────────────────────────────────

    def matches_search(self, lead: Lead) -> bool:
        if not self.search:
            return True
        needle = self.search.lower()
        return any(
            needle in (value or "").lower()
            for value in (lead.name, lead.email, lead.city)
        )

    def matches_budget(self, lead: Lead) -> bool:
        if not self.has_budget_bounds:
            return True
        amount = parse_budget_lakhs(lead.budget)
        if amount is None:
            return False
        if self.budget_min is not None and amount < self.budget_min:
            return False
        if self.budget_max is not None and amount > self.budget_max:
            return False
        return True

    def matches(self, lead: Lead) -> bool:
        if self.status is not None and lead.status != self.status:
            return False
        if self.quality is not None and lead.quality != self.quality:
            return False
        if self.city is not None and lead.city != self.city:
            return False
        if self.assigned_to is not None and lead.assigned_to != self.assigned_to:
            return False
        if self.what_to_buy and self.what_to_buy.lower() not in (lead.what_to_buy or "").lower():
            return False
        if self.created_from is not None or self.created_before is not None:
            created = _naive_utc(lead.created_at)
            if self.created_from is not None and created < self.created_from:
                return False
            if self.created_before is not None and created >= self.created_before:
                return False
        return self.matches_search(lead) and self.matches_budget(lead)


def filter_leads(leads: Iterable[Lead], criteria: LeadFilter) -> List[Lead]:
    """Keep the leads satisfying every constraint in ``criteria``, in order."""
    return [lead for lead in leads if criteria.matches(lead)]


def apply_lead_filter(query: Query, criteria: LeadFilter) -> Query:
    """Push the SQL-expressible constraints of ``criteria`` into ``query``."""
    if criteria.status is not None:
        query = query.filter(Lead.status == criteria.status)
    if criteria.quality is not None:
        query = query.filter(Lead.quality == criteria.quality)
    if criteria.city is not None:
        query = query.filter(Lead.city == criteria.city)
    if criteria.assigned_to is not None:
        query = query.filter(Lead.assigned_to == criteria.assigned_to)
    if criteria.created_from is not None:
        query = query.filter(Lead.created_at >= criteria.created_from)
    if criteria.created_before is not None:
        query = query.filter(Lead.created_at < criteria.created_before)
    if criteria.what_to_buy:
        query = query.filter(Lead.what_to_buy.ilike(contains_pattern(criteria.what_to_buy), escape=LIKE_ESCAPE))
    if criteria.search:
        pattern = contains_pattern(criteria.search)
        query = query.filter(
            or_(
                Lead.name.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.email.ilike(pattern, escape=LIKE_ESCAPE),
                Lead.city.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    return query
