import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import UUID

from app.core.database import Base
from app.utils.timestamps import utcnow


class ActivityAction(str, enum.Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lead_id = Column(UUID(as_uuid=True), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(Enum(ActivityAction, name="activityaction"), nullable=False)
    details = Column(JSON, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
