"""Lead Query Service: read side of the lead store.

Composes optional filters, ordering and pagination into store queries and
attaches activity history to each lead.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog
from app.models.lead import Lead, LeadStatus
from app.models.user import User
from app.schemas.activity import ActivityLogOut, ActivityUser
from app.schemas.lead import LeadOut, LeadPage, Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
RECENT_ACTIVITY_PER_LEAD = 3


@dataclass
class LeadFilters:
    """Optional lead list filters. Unset fields do not constrain the result."""
    search: Optional[str] = None
    status: Optional[LeadStatus] = None
    country: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


def _filter_clauses(filters: LeadFilters) -> list:
    clauses = []
    if filters.search:
        clauses.append(
            or_(
                Lead.company_name.icontains(filters.search, autoescape=True),
                Lead.email.icontains(filters.search, autoescape=True),
            )
        )
    if filters.status:
        clauses.append(Lead.status == filters.status)
    if filters.country:
        clauses.append(Lead.country.icontains(filters.country, autoescape=True))
    # Calendar-day bounds, both inclusive
    if filters.date_from:
        clauses.append(Lead.date >= datetime.combine(filters.date_from, time.min))
    if filters.date_to:
        clauses.append(Lead.date < datetime.combine(filters.date_to + timedelta(days=1), time.min))
    return clauses


def _activity_columns():
    return (
        ActivityLog.id,
        ActivityLog.lead_id,
        ActivityLog.user_id,
        ActivityLog.action,
        ActivityLog.details,
        ActivityLog.timestamp,
        User.name.label("user_name"),
    )


def _activity_out(row) -> ActivityLogOut:
    return ActivityLogOut(
        id=row.id,
        lead_id=row.lead_id,
        user_id=row.user_id,
        action=row.action,
        details=row.details,
        timestamp=row.timestamp,
        user=ActivityUser(name=row.user_name) if row.user_name is not None else None,
    )


def serialize_lead(lead: Lead, activity: Optional[List[ActivityLogOut]] = None) -> LeadOut:
    out = LeadOut.model_validate(lead)
    out.activity_logs = activity or []
    return out


async def recent_activity(
    db: AsyncSession,
    lead_ids: Iterable[UUID],
    per_lead: int = RECENT_ACTIVITY_PER_LEAD,
) -> Dict[UUID, List[ActivityLogOut]]:
    """Most recent ``per_lead`` activity entries for each lead, newest first."""
    lead_ids = list(lead_ids)
    if not lead_ids:
        return {}

    ranked = (
        select(
            *_activity_columns(),
            func.row_number()
            .over(partition_by=ActivityLog.lead_id, order_by=ActivityLog.timestamp.desc())
            .label("activity_rank"),
        )
        .outerjoin(User, User.id == ActivityLog.user_id)
        .where(ActivityLog.lead_id.in_(lead_ids))
        .subquery()
    )
    result = await db.execute(
        select(ranked)
        .where(ranked.c.activity_rank <= per_lead)
        .order_by(ranked.c.lead_id, ranked.c.timestamp.desc())
    )

    grouped: Dict[UUID, List[ActivityLogOut]] = {lead_id: [] for lead_id in lead_ids}
    for row in result:
        grouped.setdefault(row.lead_id, []).append(_activity_out(row))
    return grouped


async def activity_history(db: AsyncSession, lead_id: UUID) -> List[ActivityLogOut]:
    """Full activity history of a lead, newest first."""
    result = await db.execute(
        select(*_activity_columns())
        .outerjoin(User, User.id == ActivityLog.user_id)
        .where(ActivityLog.lead_id == lead_id)
        .order_by(ActivityLog.timestamp.desc())
    )
    return [_activity_out(row) for row in result]


async def list_leads(
    db: AsyncSession,
    filters: Optional[LeadFilters] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> LeadPage:
    """Return one page of leads, newest first, with pagination metadata.

    A page past the end yields an empty list; the metadata stays accurate.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    clauses = _filter_clauses(filters or LeadFilters())

    total = (
        await db.execute(select(func.count(Lead.id)).where(*clauses))
    ).scalar_one()

    offset = (page - 1) * limit
    leads: List[Lead] = []
    # No query past the last row; offsets there can exceed the SQL integer range
    if offset < total:
        result = await db.execute(
            select(Lead)
            .where(*clauses)
            .order_by(Lead.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        leads = list(result.scalars().all())
    logger.debug("Lead page %d: %d of %d matching leads", page, len(leads), total)
    activity = await recent_activity(db, [lead.id for lead in leads])

    return LeadPage(
        leads=[serialize_lead(lead, activity.get(lead.id)) for lead in leads],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


async def get_lead(db: AsyncSession, lead_id: UUID) -> Optional[Lead]:
    result = await db.execute(select(Lead).where(Lead.id == lead_id))
    return result.scalar_one_or_none()


async def get_lead_detail(db: AsyncSession, lead_id: UUID) -> Optional[LeadOut]:
    """A single lead with its full activity history, or None if it doesn't exist."""
    lead = await get_lead(db, lead_id)
    if lead is None:
        return None
    return serialize_lead(lead, await activity_history(db, lead_id))
