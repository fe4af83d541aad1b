"""Analytics endpoints for dashboard charts and data export.

- GET /api/v1/analytics/dashboard-stats → aggregate counts and group-bys
- GET /api/v1/analytics/export          → CSV attachment of all leads
"""

import csv
import io
import logging
from collections import Counter
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_identity
from app.models.lead import Lead, LeadStatus, QuotationStatus
from app.schemas.analytics import DashboardStats, LeadStats, MonthlyCount, NamedCount
from app.services.auth import Identity
from app.utils.timestamps import utcnow

router = APIRouter()
logger = logging.getLogger(__name__)

TOP_COUNTRIES = 10
TREND_MONTHS = 12

EXPORT_FILENAME = "leads-export.csv"
EXPORT_HEADERS = [
    "ID", "Company Name", "Email", "Country", "Status",
    "Quotation Status", "Deal Won", "Created At",
]


def _trend_start(now: datetime) -> datetime:
    """First day of the month TREND_MONTHS - 1 months before ``now``'s month."""
    months = now.year * 12 + (now.month - 1) - (TREND_MONTHS - 1)
    return datetime(months // 12, months % 12 + 1, 1)


async def _count(db: AsyncSession, *clauses) -> int:
    return (await db.execute(select(func.count(Lead.id)).where(*clauses))).scalar() or 0


@router.get("/dashboard-stats", response_model=DashboardStats)
async def dashboard_stats(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Headline counts, status and country breakdowns, and monthly lead volume."""
    stats = LeadStats(
        total_leads=await _count(db),
        quotations_sent=await _count(db, Lead.quotation_status != QuotationStatus.PENDING),
        deals_won=await _count(db, Lead.deal_won.is_(True)),
        pending_followups=await _count(
            db, Lead.call_followup.is_not(None), Lead.status != LeadStatus.CLOSED
        ),
    )

    status_rows = await db.execute(
        select(Lead.status, func.count(Lead.id)).group_by(Lead.status)
    )
    leads_by_status = [
        NamedCount(name=lead_status.value, value=count) for lead_status, count in status_rows
    ]

    country_count = func.count(Lead.id).label("lead_count")
    country_rows = await db.execute(
        select(Lead.country, country_count)
        .group_by(Lead.country)
        .order_by(desc(country_count), Lead.country)
        .limit(TOP_COUNTRIES)
    )
    leads_by_country = [NamedCount(name=country, value=count) for country, count in country_rows]

    # Bucketed in Python so the query stays portable across backends
    created = await db.execute(
        select(Lead.created_at).where(Lead.created_at >= _trend_start(utcnow()))
    )
    per_month = Counter(created_at.strftime("%Y-%m") for created_at in created.scalars())
    monthly_trends = [MonthlyCount(month=month, count=per_month[month]) for month in sorted(per_month)]

    return DashboardStats(
        stats=stats,
        leads_by_status=leads_by_status,
        leads_by_country=leads_by_country,
        monthly_trends=monthly_trends,
    )


def _csv_row(lead: Lead) -> list:
    return [
        str(lead.id),
        lead.company_name,
        lead.email,
        lead.country,
        lead.status.value,
        lead.quotation_status.value,
        "true" if lead.deal_won else "false",
        lead.created_at.isoformat(timespec="milliseconds") + "Z",
    ]


@router.get("/export")
async def export_leads(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Export every lead as a CSV attachment, newest first."""
    result = await db.execute(select(Lead).order_by(Lead.created_at.desc()))
    leads = result.scalars().all()

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for lead in leads:
        writer.writerow(_csv_row(lead))

    logger.info("User %s exported %d leads", identity.user_id, len(leads))
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
