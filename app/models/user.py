"""User model for authentication and role-based access."""

import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base
from app.utils.timestamps import utcnow


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SALES = "SALES"
    MARKETING = "MARKETING"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="userrole"), nullable=False, default=UserRole.SALES)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
