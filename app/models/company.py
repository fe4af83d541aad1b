from sqlalchemy import Column, DateTime, Integer, String, Text

from app.core.database import Base
from app.utils.timestamps import utcnow

COMPANY_ROW_ID = 1


class Company(Base):
    """Single-row branding record shown in the web UI."""
    __tablename__ = "company"

    id = Column(Integer, primary_key=True, default=COMPANY_ROW_ID)
    name = Column(String(255), nullable=False, default="My Company")
    logo = Column(Text, nullable=True)
    primary_color = Column(String(20), nullable=False, default="#4682B4")
    accent_color = Column(String(20), nullable=False, default="#FFD700")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
