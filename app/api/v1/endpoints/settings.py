"""Company branding settings.

- GET   /api/v1/settings/company → current branding (any signed-in user)
- PATCH /api/v1/settings/company → update branding (ADMIN)
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_identity, require_admin
from app.models.company import COMPANY_ROW_ID, Company
from app.schemas.company import CompanyOut, CompanyUpdate
from app.services.auth import Identity

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_or_create_company(db: AsyncSession) -> Company:
    """Load the single branding row, creating it with defaults on first use."""
    result = await db.execute(select(Company).where(Company.id == COMPANY_ROW_ID))
    company = result.scalar_one_or_none()
    if company is None:
        company = Company(id=COMPANY_ROW_ID)
        db.add(company)
        await db.commit()
        await db.refresh(company)
        logger.info("Created default company settings")
    return company


@router.get("/company", response_model=CompanyOut)
async def get_company(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return await _get_or_create_company(db)


@router.patch("/company", response_model=CompanyOut)
async def update_company(
    data: CompanyUpdate,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    company = await _get_or_create_company(db)
    for field, value in data.changes().items():
        setattr(company, field, value)
    await db.commit()
    await db.refresh(company)

    logger.info("Admin %s updated company settings: %s", admin.user_id, sorted(data.changes()))
    return company
