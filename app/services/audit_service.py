"""Lead activity log service."""

import logging
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.activity_log import ActivityAction, ActivityLog
from app.schemas.activity import CreatedDetails, UpdatedDetails

logger = logging.getLogger(__name__)


async def log_lead_activity(
    db: AsyncSession,
    lead_id: UUID,
    user_id: Optional[UUID],
    details: CreatedDetails | UpdatedDetails,
) -> ActivityLog:
    """Append an entry to a lead's audit trail.

    Args:
        db: Database session
        lead_id: UUID of the lead the action applies to
        user_id: UUID of the acting user
        details: Typed details; its ``kind`` becomes the entry's action

    Returns:
        The created activity log entry
    """
    entry = ActivityLog(
        lead_id=lead_id,
        user_id=user_id,
        action=ActivityAction(details.kind),
        details=details.model_dump(mode="json"),
    )

    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    logger.info("Activity logged: lead=%s user=%s action=%s", lead_id, user_id, details.kind)

    return entry
