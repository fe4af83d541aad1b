"""Pydantic schemas for analytics endpoints."""

from typing import List

from app.schemas.base import CamelModel


class LeadStats(CamelModel):
    total_leads: int
    quotations_sent: int
    deals_won: int
    pending_followups: int


class NamedCount(CamelModel):
    """One bar/slice of a chart."""
    name: str
    value: int


class MonthlyCount(CamelModel):
    month: str  # YYYY-MM
    count: int


class DashboardStats(CamelModel):
    stats: LeadStats
    leads_by_status: List[NamedCount]
    leads_by_country: List[NamedCount]
    monthly_trends: List[MonthlyCount]
