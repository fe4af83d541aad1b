"""Pydantic schemas for Leads."""

from datetime import datetime
from typing import Any, ClassVar, FrozenSet, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, field_validator

from app.models.lead import LeadStatus, QuotationStatus
from app.schemas.activity import ActivityLogOut
from app.schemas.base import CamelModel, PartialUpdate, UtcDatetime
from app.utils.timestamps import to_naive_utc


class LeadCreate(CamelModel):
    """Schema for creating a lead."""
    message_id: str
    thread_id: str
    marketing_user: str
    email: EmailStr
    contact_no: str
    company_name: str
    body: str
    subject: str
    date: datetime
    country: str

    rfq: Optional[str] = None
    website: Optional[str] = None
    thread_links: Optional[Any] = None
    form_sent: bool = False
    form_filled: bool = False
    response_sheet: Optional[str] = None
    followup: Optional[str] = None
    quotation_status: QuotationStatus = QuotationStatus.PENDING
    remark: Optional[str] = None
    deal_won: bool = False
    probable_customer: bool = False
    status: LeadStatus = LeadStatus.NEW
    review: Optional[str] = None
    call_followup: Optional[datetime] = None

    @field_validator("date", "call_followup")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)


class LeadUpdate(PartialUpdate):
    """Schema for a partial lead update; omitted fields keep their values."""
    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset({
        "message_id", "thread_id", "marketing_user", "email", "contact_no",
        "company_name", "body", "subject", "date", "country", "form_sent",
        "form_filled", "quotation_status", "deal_won", "probable_customer", "status",
    })

    message_id: Optional[str] = None
    thread_id: Optional[str] = None
    marketing_user: Optional[str] = None
    email: Optional[EmailStr] = None
    contact_no: Optional[str] = None
    company_name: Optional[str] = None
    body: Optional[str] = None
    subject: Optional[str] = None
    date: Optional[datetime] = None
    country: Optional[str] = None

    rfq: Optional[str] = None
    website: Optional[str] = None
    thread_links: Optional[Any] = None
    form_sent: Optional[bool] = None
    form_filled: Optional[bool] = None
    response_sheet: Optional[str] = None
    followup: Optional[str] = None
    quotation_status: Optional[QuotationStatus] = None
    remark: Optional[str] = None
    deal_won: Optional[bool] = None
    probable_customer: Optional[bool] = None
    status: Optional[LeadStatus] = None
    review: Optional[str] = None
    call_followup: Optional[datetime] = None

    @field_validator("date", "call_followup")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)

    def audit_changes(self) -> dict:
        """Submitted fields as they appeared on the wire, for the activity log."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class LeadOut(CamelModel):
    """Schema for returning lead details."""
    id: UUID
    rfq: Optional[str] = None
    message_id: str
    thread_id: str
    marketing_user: str
    email: str
    contact_no: str
    company_name: str
    body: str
    subject: str
    website: Optional[str] = None
    thread_links: Optional[Any] = None
    date: UtcDatetime
    country: str
    form_sent: bool
    form_filled: bool
    response_sheet: Optional[str] = None
    followup: Optional[str] = None
    quotation_status: QuotationStatus
    remark: Optional[str] = None
    deal_won: bool
    probable_customer: bool
    status: LeadStatus
    review: Optional[str] = None
    call_followup: Optional[UtcDatetime] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime
    activity_logs: List[ActivityLogOut] = []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class LeadPage(BaseModel):
    """Paginated lead list."""
    leads: List[LeadOut]
    pagination: Pagination
