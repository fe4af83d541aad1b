"""
Lead Mutation Service: create, partial update and delete of leads.

Every successful mutation:
  - persists the change,
  - appends an activity entry (create/update),
  - publishes an event on the "leads" channel.

The lead write and its activity entry are separate commits. There is no
optimistic-concurrency check: the fields of the last partial update to commit
win.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog
from app.models.lead import Lead
from app.schemas.activity import CreatedDetails, UpdatedDetails
from app.schemas.lead import LeadCreate, LeadOut, LeadUpdate
from app.services.audit_service import log_lead_activity
from app.services.auth import Identity, get_user
from app.services.broadcaster import (
    LEAD_CREATED, LEAD_DELETED, LEAD_UPDATED, LEADS_CHANNEL, Broadcaster, broadcaster,
)
from app.services.lead_query import get_lead, get_lead_detail
from app.utils.timestamps import next_timestamp

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Lead created"


class LeadNotFoundError(LookupError):
    """The lead id does not resolve."""

    def __init__(self, lead_id: UUID):
        super().__init__(f"Lead {lead_id} not found")
        self.lead_id = lead_id


def _publish(channel_hub: Broadcaster, event: str, data) -> None:
    # Best effort; a broadcast problem never fails the mutation
    try:
        channel_hub.publish(LEADS_CHANNEL, event, data)
    except Exception:
        logger.exception("Broadcast of %s failed", event)


async def _actor_id(db: AsyncSession, identity: Identity) -> Optional[UUID]:
    """The acting user for the audit entry, or None if the account no longer exists."""
    if await get_user(db, identity.user_id) is None:
        logger.warning(
            "User %s from a valid token no longer exists; activity recorded without a user",
            identity.user_id,
        )
        return None
    return identity.user_id


async def _reload(db: AsyncSession, lead_id: UUID) -> LeadOut:
    lead_out = await get_lead_detail(db, lead_id)
    if lead_out is None:
        # Deleted by a concurrent request between our write and this read
        raise LeadNotFoundError(lead_id)
    return lead_out


async def create_lead(
    db: AsyncSession,
    identity: Identity,
    data: LeadCreate,
    channel_hub: Broadcaster = broadcaster,
) -> LeadOut:
    actor_id = await _actor_id(db, identity)
    lead = Lead(**data.model_dump())
    db.add(lead)
    await db.commit()
    await db.refresh(lead)

    await log_lead_activity(db, lead.id, actor_id, CreatedDetails(message=CREATED_MESSAGE))

    logger.info("Created lead %s (%s) by user %s", lead.id, lead.company_name, identity.user_id)

    lead_out = await _reload(db, lead.id)
    _publish(channel_hub, LEAD_CREATED, lead_out.model_dump(mode="json", by_alias=True))
    return lead_out


async def update_lead(
    db: AsyncSession,
    identity: Identity,
    lead_id: UUID,
    data: LeadUpdate,
    channel_hub: Broadcaster = broadcaster,
) -> LeadOut:
    """Merge the submitted fields into the lead; omitted fields keep their values."""
    lead = await get_lead(db, lead_id)
    if lead is None:
        raise LeadNotFoundError(lead_id)
    actor_id = await _actor_id(db, identity)

    for field, value in data.changes().items():
        setattr(lead, field, value)
    lead.updated_at = next_timestamp(lead.updated_at)

    await db.commit()
    await db.refresh(lead)

    await log_lead_activity(db, lead.id, actor_id, UpdatedDetails(changes=data.audit_changes()))

    logger.info("Updated lead %s fields=%s by user %s", lead_id, sorted(data.changes()), identity.user_id)

    lead_out = await _reload(db, lead_id)
    _publish(channel_hub, LEAD_UPDATED, lead_out.model_dump(mode="json", by_alias=True))
    return lead_out


async def delete_lead(
    db: AsyncSession,
    lead_id: UUID,
    channel_hub: Broadcaster = broadcaster,
) -> None:
    """Delete the lead and its whole activity log."""
    lead = await get_lead(db, lead_id)
    if lead is None:
        raise LeadNotFoundError(lead_id)

    await db.execute(delete(ActivityLog).where(ActivityLog.lead_id == lead_id))
    await db.delete(lead)
    await db.commit()

    logger.info("Deleted lead %s", lead_id)

    _publish(channel_hub, LEAD_DELETED, {"id": str(lead_id)})
