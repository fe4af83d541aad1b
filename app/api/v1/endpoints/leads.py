"""Leads endpoints for lead tracking.

- GET    /api/v1/leads       → List leads (filters + pagination)
- GET    /api/v1/leads/{id}  → Lead with full activity log
- POST   /api/v1/leads       → Create new lead
- PATCH  /api/v1/leads/{id}  → Partial update
- DELETE /api/v1/leads/{id}  → Delete lead and its activity log
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_identity
from app.models.lead import LeadStatus
from app.schemas.lead import LeadCreate, LeadOut, LeadPage, LeadUpdate
from app.services.auth import Identity
from app.services.lead_mutation import LeadNotFoundError, create_lead, delete_lead, update_lead
from app.services.lead_query import (
    DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, LeadFilters, get_lead_detail, list_leads,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lead not found")


@router.get("", response_model=LeadPage)
async def list_leads_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Company name or email contains (case-insensitive)"),
    lead_status: Optional[LeadStatus] = Query(None, alias="status"),
    country: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """List leads newest first, each with its 3 most recent activity entries."""
    filters = LeadFilters(
        search=search,
        status=lead_status,
        country=country,
        date_from=date_from,
        date_to=date_to,
    )
    return await list_leads(db, filters, page=page, limit=limit)


@router.get("/{lead_id}", response_model=LeadOut)
async def get_lead_endpoint(
    lead_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get a lead with its full activity history."""
    lead = await get_lead_detail(db, lead_id)
    if lead is None:
        raise _not_found()
    return lead


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
async def create_lead_endpoint(
    data: LeadCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Create a new lead."""
    return await create_lead(db, identity, data)


@router.patch("/{lead_id}", response_model=LeadOut)
async def update_lead_endpoint(
    lead_id: UUID,
    data: LeadUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Apply a partial update; only the submitted fields change."""
    try:
        return await update_lead(db, identity, lead_id, data)
    except LeadNotFoundError:
        raise _not_found()


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lead_endpoint(
    lead_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Delete a lead and its activity log."""
    try:
        await delete_lead(db, lead_id)
    except LeadNotFoundError:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
