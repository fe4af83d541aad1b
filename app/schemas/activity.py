"""Pydantic schemas for the lead activity log.

Audit details are a tagged variant keyed by ``kind`` so each action type has
a fixed, checkable shape.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.activity_log import ActivityAction
from app.schemas.base import CamelModel, UtcDatetime


class CreatedDetails(BaseModel):
    """Details recorded when a lead is created."""
    kind: Literal["CREATED"] = "CREATED"
    message: str


class UpdatedDetails(BaseModel):
    """Details recorded when a lead is updated: the submitted fields, verbatim."""
    kind: Literal["UPDATED"] = "UPDATED"
    changes: Dict[str, Any]


ActivityDetails = Annotated[Union[CreatedDetails, UpdatedDetails], Field(discriminator="kind")]


class ActivityUser(CamelModel):
    name: str


class ActivityLogOut(CamelModel):
    """Schema for returning an activity log entry."""
    id: UUID
    lead_id: UUID
    user_id: Optional[UUID] = None
    action: ActivityAction
    details: ActivityDetails
    timestamp: UtcDatetime
    user: Optional[ActivityUser] = None
