"""Lead model for the CRM."""
import enum
import uuid
from sqlalchemy import Boolean, Column, DateTime, Enum, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base
from app.utils.timestamps import utcnow


class LeadStatus(str, enum.Enum):
    """Lead workflow status."""
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class QuotationStatus(str, enum.Enum):
    """Quotation status for a lead."""
    PENDING = "PENDING"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Lead(Base):
    """Lead model."""
    __tablename__ = "leads"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Inbound message metadata
    rfq = Column(String(255), nullable=True)
    message_id = Column(String(255), nullable=False)
    thread_id = Column(String(255), nullable=False)
    marketing_user = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    website = Column(String(500), nullable=True)
    thread_links = Column(JSON, nullable=True)

    # Contact info
    company_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    contact_no = Column(String(50), nullable=False)
    country = Column(String(100), nullable=False, index=True)

    # Workflow
    status = Column(Enum(LeadStatus, name="leadstatus"), nullable=False, default=LeadStatus.NEW, index=True)
    quotation_status = Column(
        Enum(QuotationStatus, name="quotationstatus"), nullable=False, default=QuotationStatus.PENDING
    )
    form_sent = Column(Boolean, nullable=False, default=False)
    form_filled = Column(Boolean, nullable=False, default=False)
    deal_won = Column(Boolean, nullable=False, default=False)
    probable_customer = Column(Boolean, nullable=False, default=False)
    response_sheet = Column(Text, nullable=True)
    followup = Column(Text, nullable=True)
    remark = Column(Text, nullable=True)
    review = Column(Text, nullable=True)
    call_followup = Column(DateTime, nullable=True)

    date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
